"""Object store interface consumed by the diagnostics core.

Implementations translate the store's routine "not there" answers into
StoreLookup.not_found() and raise everything else unchanged. The
diagnostics components never see store-specific exceptions for routine
absence, and never catch the fatal ones.
"""

from typing import Protocol, runtime_checkable

from jobsight.contracts import StorageObjectRef, StoreLookup


@runtime_checkable
class ObjectStore(Protocol):
    """Read-only access to blobs written by the execution engine."""

    def get_metadata(self, ref: StorageObjectRef) -> StoreLookup[dict[str, str]]:
        """Read the user metadata of a blob.

        NOT_FOUND when the blob does not exist, or when its container does
        not exist or cannot exist (a bad request for the container name).
        """
        ...

    def download_text(self, ref: StorageObjectRef) -> StoreLookup[str]:
        """Download a blob's content as text.

        NOT_FOUND only when the blob does not exist.
        """
        ...
