"""Blob causality resolution.

Answers "which invocation wrote this blob?" from the owner id the
execution engine stores in blob metadata at write time.
"""

from __future__ import annotations

import threading

import structlog

from jobsight.contracts import OwnershipRecord, StorageObjectRef, parse_invocation_id
from jobsight.core.clock import DEFAULT_CLOCK, Clock
from jobsight.core.config import DEFAULT_OWNER_METADATA_KEY
from jobsight.storage.protocols import ObjectStore

logger = structlog.get_logger(__name__)


class CausalityResolver:
    """Resolve the producing invocation of a blob.

    Each call is a single point-in-time read with no retries: a concurrent
    writer may change the answer between calls. With cache_ttl_seconds > 0,
    a resolved record is reused for that long, which the dashboard's
    eventual-consistency tolerance allows. The cache is shared across
    threads rendering the same invocation.

    Store failures other than routine absence propagate unchanged.
    """

    def __init__(
        self,
        store: ObjectStore,
        *,
        owner_metadata_key: str = DEFAULT_OWNER_METADATA_KEY,
        cache_ttl_seconds: float = 0.0,
        clock: Clock | None = None,
    ) -> None:
        if cache_ttl_seconds < 0:
            raise ValueError(f"cache_ttl_seconds must be >= 0, got {cache_ttl_seconds}")
        self._store = store
        self._owner_metadata_key = owner_metadata_key.lower()
        self._cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._cache: dict[StorageObjectRef, tuple[float, OwnershipRecord]] = {}
        self._lock = threading.Lock()

    def resolve_owner(self, ref: StorageObjectRef) -> OwnershipRecord:
        """Resolve who wrote ``ref``.

        Returns:
            MISSING if the blob (or its container) does not exist,
            NO_RECORD if it exists without a readable owner id,
            OWNED(id) otherwise.
        """
        cached = self._cached(ref)
        if cached is not None:
            return cached

        lookup = self._store.get_metadata(ref)
        if not lookup.is_found:
            record = OwnershipRecord.missing()
        else:
            # is_found guarantees a metadata dict
            metadata = lookup.value or {}
            owner_id = parse_invocation_id(self._owner_value(metadata))
            record = OwnershipRecord.no_record() if owner_id is None else OwnershipRecord.owned(owner_id)

        logger.debug(
            "Resolved blob owner",
            container=ref.container,
            blob=ref.blob_name,
            status=record.status.value,
        )
        self._remember(ref, record)
        return record

    def _owner_value(self, metadata: dict[str, str]) -> str | None:
        # Metadata keys are case-insensitive in Azure Storage
        for key, value in metadata.items():
            if key.lower() == self._owner_metadata_key:
                return value
        return None

    def _cached(self, ref: StorageObjectRef) -> OwnershipRecord | None:
        if self._cache_ttl_seconds == 0:
            return None
        with self._lock:
            entry = self._cache.get(ref)
            if entry is None:
                return None
            stored_at, record = entry
            if self._clock.monotonic() - stored_at >= self._cache_ttl_seconds:
                del self._cache[ref]
                return None
            return record

    def _remember(self, ref: StorageObjectRef, record: OwnershipRecord) -> None:
        if self._cache_ttl_seconds == 0:
            return
        now = self._clock.monotonic()
        with self._lock:
            # Drop expired entries so blobs looked up once do not accumulate
            expired = [
                key for key, (stored_at, _) in self._cache.items() if now - stored_at >= self._cache_ttl_seconds
            ]
            for key in expired:
                del self._cache[key]
            self._cache[ref] = (now, record)
