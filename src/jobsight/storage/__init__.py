"""Object store access for invocation diagnostics.

Provides the ObjectStore protocol the diagnostics core reads through and
the Azure Blob Storage implementation of it.
"""

from jobsight.storage.auth import AzureAuthConfig
from jobsight.storage.azure_blob import AzureBlobObjectStore
from jobsight.storage.protocols import ObjectStore

__all__ = [
    "AzureAuthConfig",
    "AzureBlobObjectStore",
    "ObjectStore",
]
