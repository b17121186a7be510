"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE: it depends only on pydantic and the
standard library, never on jobsight.core, jobsight.storage or
jobsight.diagnostics.

Import patterns:
    from jobsight.contracts import OwnershipRecord, StorageObjectRef
    from jobsight.contracts import decode_parameter_log_document
"""

from jobsight.contracts.enums import LookupState, OwnershipStatus, ParameterLogType
from jobsight.contracts.identity import NIL_INVOCATION_ID, InvocationId, parse_invocation_id
from jobsight.contracts.ownership import ArgumentDisplayModel, OwnershipRecord
from jobsight.contracts.parameter_logs import (
    BinderParameterLog,
    BinderParameterLogItem,
    ParameterLog,
    ParameterLogDocument,
    ReadBlobParameterLog,
    TableParameterLog,
    TextParameterLog,
    UnknownParameterLog,
    decode_parameter_log_document,
    encode_parameter_log_document,
    format_timespan,
    parse_timespan,
    validate_parameter_log_document,
)
from jobsight.contracts.snapshot import BlobLocation, InvocationArgument, InvocationSnapshot
from jobsight.contracts.storage import StorageObjectRef, StoreLookup

__all__ = [
    "NIL_INVOCATION_ID",
    "ArgumentDisplayModel",
    "BinderParameterLog",
    "BinderParameterLogItem",
    "BlobLocation",
    "InvocationArgument",
    "InvocationId",
    "InvocationSnapshot",
    "LookupState",
    "OwnershipRecord",
    "OwnershipStatus",
    "ParameterLog",
    "ParameterLogDocument",
    "ParameterLogType",
    "ReadBlobParameterLog",
    "StorageObjectRef",
    "StoreLookup",
    "TableParameterLog",
    "TextParameterLog",
    "UnknownParameterLog",
    "decode_parameter_log_document",
    "encode_parameter_log_document",
    "format_timespan",
    "parse_invocation_id",
    "parse_timespan",
    "validate_parameter_log_document",
]
