# tests/property/test_parameter_log_properties.py
"""Property-based tests for parameter log reading and formatting.

Properties:
- Whatever bytes sit in the log blob, the reader returns a document or
  None; it never raises
- Formatting a decoded document never raises and only drops parameters
- Table pluralization is singular exactly at 1
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any
from uuid import UUID

from hypothesis import given
from hypothesis import strategies as st

from jobsight.contracts import (
    BinderParameterLog,
    BinderParameterLogItem,
    InvocationSnapshot,
    ReadBlobParameterLog,
    StorageObjectRef,
    TableParameterLog,
    TextParameterLog,
    UnknownParameterLog,
    decode_parameter_log_document,
    encode_parameter_log_document,
)
from jobsight.diagnostics import LogFormatter, ParameterLogReader
from tests.fixtures.stores import InMemoryObjectStore
from tests.property.settings import DETERMINISM_SETTINGS, STANDARD_SETTINGS

LOG_REF = StorageObjectRef("azure-jobs-invoke-log", "invocation")
SNAPSHOT = InvocationSnapshot.model_validate(
    {
        "Id": str(UUID(int=7)),
        "ParameterLogBlob": {"ContainerName": LOG_REF.container, "BlobName": LOG_REF.blob_name},
    }
)

# =============================================================================
# Strategies
# =============================================================================

counts = st.integers(min_value=0, max_value=2**40)

descriptors = st.one_of(
    st.none(),
    st.fixed_dictionaries({"Type": st.just("Queue"), "QueueName": st.text(max_size=10)}),
    st.fixed_dictionaries(
        {
            "Type": st.just("Blob"),
            "ContainerName": st.text(max_size=10),
            "BlobName": st.text(max_size=10),
        }
    ),
    st.dictionaries(st.text(max_size=8), st.text(max_size=8), max_size=3),
)

leaf_logs = st.one_of(
    st.none(),
    st.builds(
        ReadBlobParameterLog,
        bytes_read=counts,
        length=counts,
        elapsed_time=st.timedeltas(min_value=timedelta(0), max_value=timedelta(days=2)),
    ),
    st.builds(TableParameterLog, entities_updated=counts),
    st.builds(TextParameterLog, value=st.one_of(st.none(), st.text(max_size=20))),
    st.builds(
        UnknownParameterLog,
        type=st.one_of(st.none(), st.text(max_size=10).filter(lambda tag: tag not in {"ReadBlob", "Table", "Binder", "Text"})),
    ),
)

binder_logs = st.builds(
    BinderParameterLog,
    items=st.one_of(
        st.none(),
        st.lists(st.builds(BinderParameterLogItem, descriptor=descriptors, log=leaf_logs), max_size=5),
    ),
)

documents = st.dictionaries(
    st.text(min_size=1, max_size=10),
    st.one_of(leaf_logs.filter(lambda log: log is not None), binder_logs),
    max_size=6,
)

# Raw JSON that looks like a parameter log but may be wrong in any way
json_values = st.recursive(
    st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=10)),
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(st.text(max_size=10), children, max_size=3),
    ),
    max_leaves=10,
)

raw_records = st.fixed_dictionaries(
    {"Type": st.sampled_from(["ReadBlob", "Table", "Binder", "Text", "Other"])},
    optional={
        "BytesRead": json_values,
        "Length": json_values,
        "ElapsedTime": json_values,
        "EntitiesUpdated": json_values,
        "Value": json_values,
        "Items": json_values,
    },
)


# =============================================================================
# Reader Properties
# =============================================================================


def _read(text: str) -> Any:
    store = InMemoryObjectStore()
    store.put(LOG_REF, text=text)
    return ParameterLogReader(store).read_formatted(SNAPSHOT)


@given(text=st.text(max_size=200))
@STANDARD_SETTINGS
def test_arbitrary_blob_text_never_raises(text: str) -> None:
    result = _read(text)

    assert result is None or isinstance(result, dict)


@given(records=st.dictionaries(st.text(max_size=10), raw_records, max_size=4))
@STANDARD_SETTINGS
def test_malformed_records_never_raise(records: dict[str, Any]) -> None:
    result = _read(json.dumps(records))

    assert result is None or set(result) <= set(records)


@given(text=st.text(max_size=200))
@STANDARD_SETTINGS
def test_truncated_documents_never_raise(text: str) -> None:
    document = json.dumps({"input": {"Type": "ReadBlob", "BytesRead": 1, "Length": 2}, "note": text})

    for cut in range(0, len(document), max(1, len(document) // 8)):
        result = _read(document[:cut])
        assert result is None or isinstance(result, dict)


# =============================================================================
# Formatter Properties
# =============================================================================


@given(document=documents)
@DETERMINISM_SETTINGS
def test_format_document_is_total_and_only_drops(document: dict[str, Any]) -> None:
    formatter = LogFormatter()

    rendered = formatter.format_document(document)

    assert set(rendered) <= set(document)
    for name, text in rendered.items():
        assert isinstance(text, str)
        assert formatter.format(document[name]) == text


@given(count=counts)
@STANDARD_SETTINGS
def test_table_singular_only_at_one(count: int) -> None:
    text = LogFormatter().format(TableParameterLog(entities_updated=count))

    assert text is not None
    assert text.endswith("entity") == (count == 1)


@given(bytes_read=counts, length=counts)
@STANDARD_SETTINGS
def test_read_blob_percent_is_finite(bytes_read: int, length: int) -> None:
    text = LogFormatter().format(ReadBlobParameterLog(bytes_read=bytes_read, length=length))

    assert text is not None
    assert "nan" not in text
    assert "inf" not in text
    assert text.endswith("% of total). ")


# =============================================================================
# Codec Properties
# =============================================================================


@given(document=documents)
@DETERMINISM_SETTINGS
def test_encoded_document_decodes_to_same_records(document: dict[str, Any]) -> None:
    assert decode_parameter_log_document(encode_parameter_log_document(document)) == document
