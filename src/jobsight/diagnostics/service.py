"""Entry points used by presentation layers.

InvocationDiagnostics wires the resolver, builder, reader and formatter
together for one storage account and renders a whole invocation with the
store reads fanned out concurrently.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import structlog

from jobsight.contracts import ArgumentDisplayModel, InvocationArgument, InvocationSnapshot
from jobsight.core.clock import Clock
from jobsight.core.config import JobsightSettings
from jobsight.diagnostics.arguments import ArgumentModelBuilder
from jobsight.diagnostics.causality import CausalityResolver
from jobsight.diagnostics.descriptors import DescriptorRenderer
from jobsight.diagnostics.formatting import LogFormatter
from jobsight.diagnostics.parameter_logs import ParameterLogReader
from jobsight.diagnostics.report import InvocationReport
from jobsight.storage.protocols import ObjectStore

logger = structlog.get_logger(__name__)


class InvocationDiagnostics:
    """Diagnostics for invocations that ran against one storage account."""

    def __init__(
        self,
        store: ObjectStore,
        *,
        owner_metadata_key: str | None = None,
        cache_ttl_seconds: float = 0.0,
        max_workers: int = 4,
        descriptor_renderer: DescriptorRenderer | None = None,
        clock: Clock | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        resolver_options: dict[str, Any] = {"cache_ttl_seconds": cache_ttl_seconds, "clock": clock}
        if owner_metadata_key is not None:
            resolver_options["owner_metadata_key"] = owner_metadata_key
        self._builder = ArgumentModelBuilder(CausalityResolver(store, **resolver_options))
        self._reader = ParameterLogReader(store, LogFormatter(descriptor_renderer))
        self._max_workers = max_workers

    @classmethod
    def from_settings(
        cls,
        store: ObjectStore,
        settings: JobsightSettings,
        *,
        descriptor_renderer: DescriptorRenderer | None = None,
    ) -> InvocationDiagnostics:
        return cls(
            store,
            owner_metadata_key=settings.causality.owner_metadata_key,
            cache_ttl_seconds=settings.causality.cache_ttl_seconds,
            max_workers=settings.rendering.max_workers,
            descriptor_renderer=descriptor_renderer,
        )

    def build_argument_model(
        self,
        snapshot: InvocationSnapshot,
        argument: InvocationArgument,
    ) -> ArgumentDisplayModel | None:
        """Display model for one argument of ``snapshot``, or None."""
        return self._builder.build_model(
            argument.value,
            snapshot.id,
            is_output=argument.is_blob_output,
        )

    def get_formatted_parameter_logs(self, snapshot: InvocationSnapshot) -> dict[str, str] | None:
        """Parameter name -> display text, or None when no log is available."""
        return self._reader.read_formatted(snapshot)

    def render(self, snapshot: InvocationSnapshot) -> InvocationReport:
        """Render every blob-bound argument and the parameter log.

        Reads target disjoint blobs and run concurrently; results are joined
        after all of them finish. A fatal store error from any read
        propagates once the others have completed.
        """
        blob_arguments = {name: argument for name, argument in snapshot.arguments.items() if argument.is_blob}

        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="jobsight-render") as executor:
            log_future = executor.submit(self.get_formatted_parameter_logs, snapshot)
            argument_futures: dict[str, Future[ArgumentDisplayModel | None]] = {
                name: executor.submit(self.build_argument_model, snapshot, argument) for name, argument in blob_arguments.items()
            }

        # Leaving the executor waited for every read; result() re-raises failures
        arguments: dict[str, ArgumentDisplayModel] = {}
        for name, future in argument_futures.items():
            model = future.result()
            if model is not None:
                arguments[name] = model
        parameter_logs = log_future.result()

        logger.debug(
            "Rendered invocation",
            invocation_id=str(snapshot.id),
            blob_arguments=len(blob_arguments),
            modeled_arguments=len(arguments),
            has_parameter_logs=parameter_logs is not None,
        )
        return InvocationReport(snapshot=snapshot, arguments=arguments, parameter_logs=parameter_logs)
