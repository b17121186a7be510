"""Tests for parameter log retrieval."""

import json

import pytest
from azure.core.exceptions import HttpResponseError

from jobsight.contracts import ReadBlobParameterLog, StorageObjectRef, TableParameterLog
from jobsight.diagnostics import ParameterLogReader
from tests.fixtures.stores import FailingObjectStore, InMemoryObjectStore

LOG_BLOB = {"ContainerName": "azure-jobs-invoke-log", "BlobName": "invocation-1"}
LOG_REF = StorageObjectRef("azure-jobs-invoke-log", "invocation-1")


class TestReadLogs:
    def test_inline_logs_take_precedence(self, store: InMemoryObjectStore, make_snapshot) -> None:
        store.put(LOG_REF, text=json.dumps({"blob": {"Type": "Table", "EntitiesUpdated": 9}}))
        snapshot = make_snapshot(
            ParameterLogs={"inline": {"Type": "Table", "EntitiesUpdated": 1}},
            ParameterLogBlob=LOG_BLOB,
        )

        document = ParameterLogReader(store).read_logs(snapshot)

        assert document == {"inline": TableParameterLog(entities_updated=1)}
        assert store.download_calls == []

    def test_empty_inline_logs_still_take_precedence(self, store: InMemoryObjectStore, make_snapshot) -> None:
        snapshot = make_snapshot(ParameterLogs={}, ParameterLogBlob=LOG_BLOB)

        assert ParameterLogReader(store).read_logs(snapshot) == {}
        assert store.download_calls == []

    def test_reads_log_blob(self, store: InMemoryObjectStore, make_snapshot) -> None:
        store.put(
            LOG_REF,
            text=json.dumps({"input": {"Type": "ReadBlob", "BytesRead": 50, "Length": 100}}),
        )
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        document = ParameterLogReader(store).read_logs(snapshot)

        assert document == {"input": ReadBlobParameterLog(bytes_read=50, length=100)}
        assert store.download_calls == [LOG_REF]

    def test_null_record_kept_as_none(self, store: InMemoryObjectStore, make_snapshot) -> None:
        store.put(LOG_REF, text=json.dumps({"a": None, "t": {"Type": "Table", "EntitiesUpdated": 2}}))
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        document = ParameterLogReader(store).read_logs(snapshot)

        assert document == {"a": None, "t": TableParameterLog(entities_updated=2)}

    def test_no_log_blob_recorded(self, store: InMemoryObjectStore, make_snapshot) -> None:
        assert ParameterLogReader(store).read_logs(make_snapshot()) is None
        assert store.download_calls == []

    def test_log_blob_not_written_yet(self, store: InMemoryObjectStore, make_snapshot) -> None:
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        assert ParameterLogReader(store).read_logs(snapshot) is None

    @pytest.mark.parametrize(
        "text",
        [
            "",
            '{"input": {"Type": "ReadBlob", "BytesRead": 5',
            "[]",
            '{"t": {"Type": "Table", "EntitiesUpdated": "many"}}',
        ],
    )
    def test_corrupt_log_is_none(self, store: InMemoryObjectStore, make_snapshot, text: str) -> None:
        store.put(LOG_REF, text=text)
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        assert ParameterLogReader(store).read_logs(snapshot) is None

    def test_store_failure_propagates(self, make_snapshot) -> None:
        reader = ParameterLogReader(FailingObjectStore(HttpResponseError(message="forbidden")))

        with pytest.raises(HttpResponseError):
            reader.read_logs(make_snapshot(ParameterLogBlob=LOG_BLOB))


class TestReadFormatted:
    def test_formats_document(self, store: InMemoryObjectStore, make_snapshot) -> None:
        store.put(
            LOG_REF,
            text=json.dumps(
                {
                    "input": {"Type": "ReadBlob", "BytesRead": 50, "Length": 100},
                    "table": {"Type": "Table", "EntitiesUpdated": 1},
                    "future": {"Type": "Unheard"},
                }
            ),
        )
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        assert ParameterLogReader(store).read_formatted(snapshot) == {
            "input": "Read 50 bytes (50.00% of total). ",
            "table": "Updated 1 entity",
        }

    def test_no_log_is_none(self, store: InMemoryObjectStore, make_snapshot) -> None:
        assert ParameterLogReader(store).read_formatted(make_snapshot()) is None

    def test_null_record_skipped_rest_rendered(self, store: InMemoryObjectStore, make_snapshot) -> None:
        store.put(LOG_REF, text=json.dumps({"a": None, "b": {"Type": "Text", "Value": "hi"}}))
        snapshot = make_snapshot(ParameterLogBlob=LOG_BLOB)

        assert ParameterLogReader(store).read_formatted(snapshot) == {"b": "hi"}

    def test_inline_null_record_skipped(self, store: InMemoryObjectStore, make_snapshot) -> None:
        snapshot = make_snapshot(ParameterLogs={"a": None, "t": {"Type": "Table", "EntitiesUpdated": 1}})

        assert ParameterLogReader(store).read_formatted(snapshot) == {"t": "Updated 1 entity"}
