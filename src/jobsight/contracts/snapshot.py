"""Invocation snapshots produced by the execution engine.

A snapshot is the engine's record of one function invocation: its id, the
storage account it ran against, its arguments, and where its parameter log
lives. Field names follow the engine's JSON (PascalCase); unknown fields
are ignored so newer engines can add to the snapshot freely.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobsight.contracts.identity import InvocationId
from jobsight.contracts.parameter_logs import ParameterLogDocument
from jobsight.contracts.storage import StorageObjectRef


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BlobLocation(_SnapshotModel):
    """Location of a blob written by the engine (e.g. the parameter log)."""

    container_name: str = Field(alias="ContainerName")
    blob_name: str = Field(alias="BlobName")

    @field_validator("container_name", "blob_name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("blob location parts cannot be empty")
        return v

    def to_ref(self) -> StorageObjectRef:
        return StorageObjectRef(container=self.container_name, blob_name=self.blob_name)


class InvocationArgument(_SnapshotModel):
    """An argument value as the engine bound it."""

    value: str | None = Field(default=None, alias="Value")
    is_blob: bool = Field(default=False, alias="IsBlob")
    is_blob_output: bool = Field(default=False, alias="IsBlobOutput")


class InvocationSnapshot(_SnapshotModel):
    """Read-only view of one function invocation."""

    id: InvocationId = Field(alias="Id")
    function_display_title: str | None = Field(default=None, alias="FunctionDisplayTitle")
    storage_connection_string: str | None = Field(default=None, alias="StorageConnectionString")
    arguments: dict[str, InvocationArgument] = Field(default_factory=dict, alias="Arguments")
    parameter_logs: ParameterLogDocument | None = Field(default=None, alias="ParameterLogs")
    parameter_log_blob: BlobLocation | None = Field(default=None, alias="ParameterLogBlob")
    start_time: datetime | None = Field(default=None, alias="StartTime")
    end_time: datetime | None = Field(default=None, alias="EndTime")
    succeeded: bool | None = Field(default=None, alias="Succeeded")
    exception_message: str | None = Field(default=None, alias="ExceptionMessage")

    @classmethod
    def from_json(cls, text: str | bytes) -> InvocationSnapshot:
        """Parse a snapshot from the engine's JSON.

        Raises:
            pydantic.ValidationError: If the JSON is malformed or invalid
        """
        return cls.model_validate_json(text)

    @classmethod
    def from_file(cls, path: Path) -> InvocationSnapshot:
        """Load a snapshot JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the content is invalid
        """
        return cls.from_json(path.read_bytes())
