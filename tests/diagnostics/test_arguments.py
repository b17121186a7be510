"""Tests for argument display models."""

import pytest

from jobsight.contracts import NIL_INVOCATION_ID, StorageObjectRef
from jobsight.diagnostics import ArgumentModelBuilder, CausalityResolver
from tests.conftest import CURRENT_INVOCATION_ID, OTHER_INVOCATION_ID
from tests.fixtures.stores import InMemoryObjectStore


@pytest.fixture
def builder(store: InMemoryObjectStore) -> ArgumentModelBuilder:
    return ArgumentModelBuilder(CausalityResolver(store))


class TestBuildModel:
    def test_self_owned_output(self, store: InMemoryObjectStore, builder: ArgumentModelBuilder) -> None:
        store.put("out/result.json", metadata={"AzureJobsParentId": str(CURRENT_INVOCATION_ID)})

        model = builder.build_model("out/result.json", CURRENT_INVOCATION_ID, is_output=True)

        assert model is not None
        assert model.ref == StorageObjectRef("out", "result.json")
        assert model.is_output
        assert not model.is_missing
        assert model.owner_id == CURRENT_INVOCATION_ID
        assert model.is_self_owned

    def test_written_by_other_invocation(self, store: InMemoryObjectStore, builder: ArgumentModelBuilder) -> None:
        store.put("in/data.csv", metadata={"AzureJobsParentId": str(OTHER_INVOCATION_ID)})

        model = builder.build_model("in/data.csv", CURRENT_INVOCATION_ID, is_output=False)

        assert model is not None
        assert model.owner_id == OTHER_INVOCATION_ID
        assert not model.is_self_owned
        assert not model.is_missing

    def test_missing_blob(self, builder: ArgumentModelBuilder) -> None:
        model = builder.build_model("in/absent.csv", CURRENT_INVOCATION_ID, is_output=False)

        assert model is not None
        assert model.is_missing
        assert model.owner_id is None
        assert not model.is_self_owned

    def test_no_record_keeps_nil_owner(self, store: InMemoryObjectStore, builder: ArgumentModelBuilder) -> None:
        store.put("in/uploaded.csv")

        model = builder.build_model("in/uploaded.csv", CURRENT_INVOCATION_ID, is_output=False)

        assert model is not None
        assert model.owner_id == NIL_INVOCATION_ID
        assert not model.is_missing
        assert not model.is_self_owned

    def test_no_record_never_self_owned_even_for_nil_current(
        self, store: InMemoryObjectStore, builder: ArgumentModelBuilder
    ) -> None:
        store.put("in/uploaded.csv")

        model = builder.build_model("in/uploaded.csv", NIL_INVOCATION_ID, is_output=False)

        assert model is not None
        assert not model.is_self_owned

    @pytest.mark.parametrize("value", [None, "", "42", "a/b/c", "container/"])
    def test_non_reference_returns_none_without_store_call(
        self, store: InMemoryObjectStore, builder: ArgumentModelBuilder, value: str | None
    ) -> None:
        assert builder.build_model(value, CURRENT_INVOCATION_ID, is_output=False) is None
        assert store.metadata_calls == []
