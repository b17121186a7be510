"""Azure Storage credentials for reading invocation state.

Exactly one of four methods must be configured:
1. connection_string - account connection string (what invocation
   snapshots carry)
2. sas_token + account_url - read-only SAS token
3. use_managed_identity + account_url - Azure Managed Identity
4. tenant_id + client_id + client_secret + account_url - Service Principal

Secrets belong in environment variables (``${AZURE_STORAGE_CONNECTION_STRING}``
in the settings file), not in the file itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self, cast

from pydantic import BaseModel, model_validator

if TYPE_CHECKING:
    from azure.storage.blob import BlobServiceClient

_METHODS_HINT = (
    "connection_string, "
    "sas_token + account_url, "
    "managed identity (use_managed_identity + account_url), or "
    "service principal (tenant_id + client_id + client_secret + account_url)"
)


def _is_set(value: str | None) -> bool:
    """Whitespace-only strings count as unset."""
    return value is not None and bool(value.strip())


class AzureAuthConfig(BaseModel):
    """Validated Azure Storage authentication settings."""

    model_config = {"extra": "forbid", "frozen": True}

    connection_string: str | None = None
    sas_token: str | None = None
    use_managed_identity: bool = False
    account_url: str | None = None
    tenant_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = None

    @classmethod
    def from_connection_string(cls, connection_string: str) -> AzureAuthConfig:
        return cls(connection_string=connection_string)

    @model_validator(mode="after")
    def validate_auth_method(self) -> Self:
        """Ensure exactly one complete auth method is configured.

        Raises:
            ValueError: If zero or several methods are configured, or a
                method is only partially configured.
        """
        has_url = _is_set(self.account_url)
        sp_fields = {
            "tenant_id": self.tenant_id,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        if _is_set(self.sas_token) and not has_url:
            raise ValueError("SAS token auth requires account_url. Example: https://myaccount.blob.core.windows.net")
        if self.use_managed_identity and not has_url:
            raise ValueError("Managed Identity auth requires account_url. Example: https://myaccount.blob.core.windows.net")

        sp_given = [name for name, value in sp_fields.items() if value is not None]
        if sp_given and (len(sp_given) < len(sp_fields) or not has_url):
            missing = [name for name, value in sp_fields.items() if value is None]
            if not has_url:
                missing.append("account_url")
            raise ValueError(f"Service Principal auth requires all fields. Missing: {', '.join(missing)}")

        configured = [
            _is_set(self.connection_string),
            _is_set(self.sas_token) and has_url,
            self.use_managed_identity and has_url,
            all(_is_set(value) for value in sp_fields.values()) and has_url,
        ]
        active = sum(configured)
        if active == 0:
            raise ValueError(f"No authentication method configured. Provide one of: {_METHODS_HINT}")
        if active > 1:
            raise ValueError(f"Multiple authentication methods configured. Provide exactly one of: {_METHODS_HINT}")
        return self

    @property
    def auth_method(self) -> str:
        """Active method: connection_string, sas_token, managed_identity or service_principal."""
        if _is_set(self.connection_string):
            return "connection_string"
        if _is_set(self.sas_token):
            return "sas_token"
        if self.use_managed_identity:
            return "managed_identity"
        return "service_principal"

    def create_blob_service_client(self) -> BlobServiceClient:
        """Create a BlobServiceClient for the configured method.

        Raises:
            ImportError: If azure-storage-blob (or azure-identity for managed
                identity / service principal) is not installed.
        """
        try:
            from azure.storage.blob import BlobServiceClient
        except ImportError as e:
            raise ImportError("azure-storage-blob is required. Install with: pip install azure-storage-blob") from e

        method = self.auth_method
        if method == "connection_string":
            return BlobServiceClient.from_connection_string(cast(str, self.connection_string))

        account_url = cast(str, self.account_url).rstrip("/")
        if method == "sas_token":
            sas_token = cast(str, self.sas_token)
            sas = sas_token if sas_token.startswith("?") else f"?{sas_token}"
            return BlobServiceClient(f"{account_url}{sas}")

        try:
            from azure.identity import ClientSecretCredential, DefaultAzureCredential
        except ImportError as e:
            raise ImportError(f"azure-identity is required for {method} auth. Install with: pip install azure-identity") from e

        if method == "managed_identity":
            return BlobServiceClient(account_url, credential=DefaultAzureCredential())

        credential = ClientSecretCredential(
            tenant_id=cast(str, self.tenant_id),
            client_id=cast(str, self.client_id),
            client_secret=cast(str, self.client_secret),
        )
        return BlobServiceClient(account_url, credential=credential)
