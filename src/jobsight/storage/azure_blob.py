"""Azure Blob Storage implementation of ObjectStore.

Three-tier trust model:
    - Azure SDK calls = EXTERNAL SYSTEM -> translate routine absence,
      propagate everything else unchanged
    - Blob content = THEIR DATA -> returned as text, parsed by the caller
    - Our lookup results = OUR CODE -> let it crash
"""

from __future__ import annotations

import time

import structlog
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

from jobsight.contracts import StorageObjectRef, StoreLookup
from jobsight.storage.auth import AzureAuthConfig

logger = structlog.get_logger(__name__)

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404

# Reading properties of a blob in a container whose name is invalid comes
# back as 400 rather than 404; both mean "there is no such blob".
_METADATA_ABSENT_STATUSES = frozenset({_HTTP_NOT_FOUND, _HTTP_BAD_REQUEST})
_DOWNLOAD_ABSENT_STATUSES = frozenset({_HTTP_NOT_FOUND})


def _status_of(error: HttpResponseError) -> int | None:
    if isinstance(error, ResourceNotFoundError):
        return _HTTP_NOT_FOUND
    return error.status_code


class AzureBlobObjectStore:
    """Read blob metadata and content through azure-storage-blob."""

    def __init__(self, service_client: BlobServiceClient, *, encoding: str = "utf-8-sig") -> None:
        """Initialize the store.

        Args:
            service_client: Client for the storage account the invocation used
            encoding: Text encoding for downloads. The default drops the byte
                order mark some engine versions write.
        """
        self._service_client = service_client
        self._encoding = encoding

    @classmethod
    def from_auth_config(cls, auth_config: AzureAuthConfig) -> AzureBlobObjectStore:
        return cls(auth_config.create_blob_service_client())

    @classmethod
    def from_connection_string(cls, connection_string: str) -> AzureBlobObjectStore:
        return cls.from_auth_config(AzureAuthConfig.from_connection_string(connection_string))

    def get_metadata(self, ref: StorageObjectRef) -> StoreLookup[dict[str, str]]:
        blob_client = self._service_client.get_blob_client(container=ref.container, blob=ref.blob_name)
        start_time = time.perf_counter()
        try:
            properties = blob_client.get_blob_properties()
        except HttpResponseError as e:
            status = _status_of(e)
            if status not in _METADATA_ABSENT_STATUSES:
                raise
            logger.debug(
                "Blob not found",
                operation="get_blob_properties",
                container=ref.container,
                blob=ref.blob_name,
                status=status,
            )
            return StoreLookup.not_found()

        logger.debug(
            "Read blob properties",
            container=ref.container,
            blob=ref.blob_name,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return StoreLookup.found(dict(properties.metadata or {}))

    def download_text(self, ref: StorageObjectRef) -> StoreLookup[str]:
        blob_client = self._service_client.get_blob_client(container=ref.container, blob=ref.blob_name)
        start_time = time.perf_counter()
        try:
            content = blob_client.download_blob().readall()
        except HttpResponseError as e:
            status = _status_of(e)
            if status not in _DOWNLOAD_ABSENT_STATUSES:
                raise
            logger.debug(
                "Blob not found",
                operation="download_blob",
                container=ref.container,
                blob=ref.blob_name,
                status=status,
            )
            return StoreLookup.not_found()

        logger.debug(
            "Downloaded blob",
            container=ref.container,
            blob=ref.blob_name,
            size_bytes=len(content),
            latency_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        # Undecodable bytes surface as a parse failure downstream, not here
        return StoreLookup.found(content.decode(self._encoding, errors="replace"))
