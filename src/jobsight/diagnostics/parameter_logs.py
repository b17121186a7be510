"""Parameter log retrieval for an invocation.

The parameter log is either embedded in the snapshot (invocation finished
and the engine materialized it) or lives in a blob the engine rewrites while
the invocation runs. The blob may not exist yet, and may be truncated or
corrupt if the producer crashed mid-write; neither is an error for the
reader of the log.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from jobsight.contracts import InvocationSnapshot, ParameterLogDocument, decode_parameter_log_document
from jobsight.diagnostics.formatting import LogFormatter
from jobsight.storage.protocols import ObjectStore

logger = structlog.get_logger(__name__)


class ParameterLogReader:
    """Resolve an invocation's parameter log document."""

    def __init__(self, store: ObjectStore, formatter: LogFormatter | None = None) -> None:
        self._store = store
        self._formatter = formatter if formatter is not None else LogFormatter()

    def read_logs(self, snapshot: InvocationSnapshot) -> ParameterLogDocument | None:
        """Return the decoded document, or None when no log is available.

        None covers: no log blob recorded yet, blob not flushed yet, and a
        blob whose content cannot be decoded. Store failures other than
        "not found" propagate.
        """
        if snapshot.parameter_logs is not None:
            return snapshot.parameter_logs

        if snapshot.parameter_log_blob is None:
            return None

        ref = snapshot.parameter_log_blob.to_ref()
        lookup = self._store.download_text(ref)
        if not lookup.is_found:
            # Common case while the invocation is still running
            return None

        # is_found guarantees text
        contents = lookup.value or ""
        try:
            return decode_parameter_log_document(contents)
        except ValidationError as e:
            # THEIR DATA: a crashed writer can leave a partial document
            logger.debug(
                "Parameter log unreadable",
                invocation_id=str(snapshot.id),
                container=ref.container,
                blob=ref.blob_name,
                error_count=e.error_count(),
            )
            return None

    def read_formatted(self, snapshot: InvocationSnapshot) -> dict[str, str] | None:
        """Return the log as parameter name -> display text.

        Parameters whose record has nothing to show are omitted.
        """
        document = self.read_logs(snapshot)
        if document is None:
            return None
        return self._formatter.format_document(document)
