"""
Configuration schema and loading for jobsight.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from jobsight.storage.auth import AzureAuthConfig

# Metadata key the execution engine writes on every blob it produces
DEFAULT_OWNER_METADATA_KEY = "AzureJobsParentId"

_AUTH_FIELDS = (
    "connection_string",
    "sas_token",
    "use_managed_identity",
    "account_url",
    "tenant_id",
    "client_id",
    "client_secret",
)


class StorageSettings(BaseModel):
    """Default storage credentials.

    Used when an invocation snapshot does not carry its own connection
    string. All fields are optional; when any is set, the combination must
    form exactly one valid auth method (see AzureAuthConfig).

    Example YAML:
        storage:
          connection_string: "${AZURE_STORAGE_CONNECTION_STRING}"
    """

    model_config = {"frozen": True, "extra": "forbid"}

    connection_string: str | None = Field(default=None, description="Azure Storage connection string")
    sas_token: str | None = Field(default=None, description="SAS token (with or without leading '?')")
    use_managed_identity: bool = Field(default=False, description="Use Azure Managed Identity")
    account_url: str | None = Field(default=None, description="Storage account URL")
    tenant_id: str | None = Field(default=None, description="Azure AD tenant ID for Service Principal auth")
    client_id: str | None = Field(default=None, description="Azure AD client ID for Service Principal auth")
    client_secret: str | None = Field(default=None, description="Azure AD client secret for Service Principal auth")

    @property
    def has_credentials(self) -> bool:
        return any(getattr(self, name) for name in _AUTH_FIELDS)

    @model_validator(mode="after")
    def validate_auth_config(self) -> Self:
        """Delegate auth validation to AzureAuthConfig when credentials are given."""
        if self.has_credentials:
            self.get_auth_config()
        return self

    def get_auth_config(self) -> AzureAuthConfig | None:
        """Return the AzureAuthConfig for these settings, or None if unset."""
        if not self.has_credentials:
            return None
        return AzureAuthConfig(**{name: getattr(self, name) for name in _AUTH_FIELDS})


class CausalitySettings(BaseModel):
    """Blob ownership resolution settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    owner_metadata_key: str = Field(
        default=DEFAULT_OWNER_METADATA_KEY,
        description="Blob metadata key holding the writer invocation id",
    )
    cache_ttl_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Seconds to reuse a resolved owner (0 disables caching)",
    )

    @field_validator("owner_metadata_key")
    @classmethod
    def validate_metadata_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("owner_metadata_key cannot be empty")
        return v.strip()


class RenderingSettings(BaseModel):
    """Invocation rendering settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_workers: int = Field(
        default=4,
        gt=0,
        description="Concurrent store reads per rendered invocation",
    )


class LoggingSettings(BaseModel):
    """Log output settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Log level")
    json_output: bool = Field(default=False, description="Emit JSON log lines instead of console text")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


class JobsightSettings(BaseModel):
    """Top-level jobsight configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    storage: StorageSettings = Field(default_factory=StorageSettings, description="Default storage credentials")
    causality: CausalitySettings = Field(default_factory=CausalitySettings, description="Ownership resolution")
    rendering: RenderingSettings = Field(default_factory=RenderingSettings, description="Rendering concurrency")
    logging: LoggingSettings = Field(default_factory=LoggingSettings, description="Log output")


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} in config values.

    A reference with no environment value and no default is left as-is so
    validation reports it instead of silently using an empty string.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        if default is not None:
            return default
        return match.group(0)

    def expand(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        if isinstance(value, dict):
            return {k: expand(v) for k, v in value.items()}
        if isinstance(value, list):
            return [expand(item) for item in value]
        return value

    return {k: expand(v) for k, v in config.items()}


def _lowercase_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lowercase_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path | None = None) -> JobsightSettings:
    """Load settings from an optional YAML file with environment overrides.

    Precedence (highest first):
    1. Environment variables (JOBSIGHT_*), nested with double underscores:
       JOBSIGHT_CAUSALITY__CACHE_TTL_SECONDS=30
    2. Config file
    3. Defaults from the Pydantic schema

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        pydantic.ValidationError: If the merged configuration is invalid
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="JOBSIGHT",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lowercase_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _expand_env_vars(raw_config)

    return JobsightSettings(**raw_config)
