"""Parameter log records written by the execution engine.

A parameter log document maps each parameter name of an invocation to a
tagged record describing what the binding did at runtime (bytes read,
entities updated, nested bindings, free text). The engine serializes the
document as JSON with PascalCase field names and a ``Type`` tag:

    {
        "input": {"Type": "ReadBlob", "BytesRead": 50, "Length": 100,
                  "ElapsedTime": "00:00:01.5000000"},
        "table": {"Type": "Table", "EntitiesUpdated": 3}
    }

Records are a closed union. Any other tag (or no tag) decodes to
UnknownParameterLog instead of failing, and extra fields are ignored, so
documents written by newer engines still decode.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Discriminator, Field, PlainSerializer, Tag, TypeAdapter

from jobsight.contracts.enums import ParameterLogType

# .NET TimeSpan text form: [-][d.]hh:mm:ss[.fffffff]
_TIMESPAN_PATTERN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{2}):(?P<seconds>\d{2})(?:\.(?P<fraction>\d{1,7}))?$",
    re.ASCII,
)

_UNKNOWN_TAG = "Unknown"
_KNOWN_TAGS = frozenset(tag.value for tag in ParameterLogType)


def parse_timespan(value: Any) -> Any:
    """Parse the engine's TimeSpan text into a timedelta.

    Non-string values pass through to pydantic's own timedelta handling.
    Sub-microsecond ticks are truncated.

    Raises:
        ValueError: If a string value is not in TimeSpan form
    """
    if not isinstance(value, str):
        return value
    match = _TIMESPAN_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid TimeSpan value: {value!r}")
    ticks = int((match["fraction"] or "").ljust(7, "0"))
    try:
        delta = timedelta(
            days=int(match["days"] or 0),
            hours=int(match["hours"]),
            minutes=int(match["minutes"]),
            seconds=int(match["seconds"]),
            microseconds=ticks // 10,
        )
    except OverflowError as e:
        raise ValueError(f"TimeSpan out of range: {value!r}") from e
    return -delta if match["sign"] else delta


def format_timespan(delta: timedelta) -> str:
    """Format a timedelta in the engine's TimeSpan text form."""
    sign = "-" if delta < timedelta(0) else ""
    delta = abs(delta)
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if delta.days:
        text = f"{delta.days}.{text}"
    if delta.microseconds:
        text = f"{text}.{delta.microseconds * 10:07d}"
    return f"{sign}{text}"


TimeSpan = Annotated[
    timedelta,
    BeforeValidator(parse_timespan),
    PlainSerializer(format_timespan, return_type=str),
]


class _ParameterLogModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ReadBlobParameterLog(_ParameterLogModel):
    """Progress of a blob read binding."""

    type: Literal["ReadBlob"] = Field(default="ReadBlob", alias="Type")
    bytes_read: int = Field(default=0, ge=0, alias="BytesRead")
    length: int = Field(default=0, ge=0, alias="Length")
    elapsed_time: TimeSpan = Field(default=timedelta(0), alias="ElapsedTime")


class TableParameterLog(_ParameterLogModel):
    """Entities written through a table binding."""

    type: Literal["Table"] = Field(default="Table", alias="Type")
    entities_updated: int = Field(default=0, ge=0, alias="EntitiesUpdated")


class TextParameterLog(_ParameterLogModel):
    """Free-form status text reported by a binding."""

    type: Literal["Text"] = Field(default="Text", alias="Type")
    value: str | None = Field(default=None, alias="Value")


class BinderParameterLogItem(_ParameterLogModel):
    """One object bound at runtime through a binder parameter.

    The descriptor is kept as the engine wrote it; turning it into display
    text is the job of a DescriptorRenderer.
    """

    descriptor: dict[str, Any] | None = Field(default=None, alias="Descriptor")
    log: ParameterLog | None = Field(default=None, alias="Log")


class BinderParameterLog(_ParameterLogModel):
    """Objects bound imperatively during the invocation.

    ``items`` is None when the engine never recorded any, which is not the
    same as an empty list.
    """

    type: Literal["Binder"] = Field(default="Binder", alias="Type")
    items: list[BinderParameterLogItem] | None = Field(default=None, alias="Items")


class UnknownParameterLog(_ParameterLogModel):
    """Record with a tag this version does not understand."""

    type: str | None = Field(default=None, alias="Type")


def _parameter_log_tag(value: Any) -> str:
    """Pick the union member for a raw dict or an already-built record."""
    if isinstance(value, dict):
        tag = value.get("Type", value.get("type"))
    else:
        tag = getattr(value, "type", None)
    if isinstance(tag, str) and tag in _KNOWN_TAGS:
        return tag
    return _UNKNOWN_TAG


ParameterLog = Annotated[
    Union[
        Annotated[ReadBlobParameterLog, Tag(ParameterLogType.READ_BLOB.value)],
        Annotated[TableParameterLog, Tag(ParameterLogType.TABLE.value)],
        Annotated[BinderParameterLog, Tag(ParameterLogType.BINDER.value)],
        Annotated[TextParameterLog, Tag(ParameterLogType.TEXT.value)],
        Annotated[UnknownParameterLog, Tag(_UNKNOWN_TAG)],
    ],
    Discriminator(_parameter_log_tag),
]

# A null value stands for a parameter with nothing recorded; only that
# entry is skipped when the document is rendered.
ParameterLogDocument = dict[str, ParameterLog | None]

# Resolve the recursive reference from binder items back to the union
BinderParameterLogItem.model_rebuild()
BinderParameterLog.model_rebuild()

_DOCUMENT_ADAPTER: TypeAdapter[ParameterLogDocument] = TypeAdapter(ParameterLogDocument)


def decode_parameter_log_document(text: str | bytes) -> ParameterLogDocument:
    """Decode a parameter log document from its JSON text.

    Raises:
        pydantic.ValidationError: If the text is not valid JSON, the top
            level is not an object, or a known record has invalid fields
    """
    return _DOCUMENT_ADAPTER.validate_json(text)


def validate_parameter_log_document(data: Any) -> ParameterLogDocument:
    """Validate an already-parsed document (e.g. embedded in a snapshot)."""
    return _DOCUMENT_ADAPTER.validate_python(data)


def encode_parameter_log_document(document: ParameterLogDocument) -> str:
    """Encode a parameter log document in the engine's JSON form."""
    return _DOCUMENT_ADAPTER.dump_json(document, by_alias=True).decode("utf-8")
