"""Blob references and store lookup results.

StoreLookup replaces the "catch 404, rethrow the rest" pattern with an
explicit state. Store adapters decide what counts as routine absence;
callers match on the state instead of filtering exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from jobsight.contracts.enums import LookupState

T = TypeVar("T")

_SEPARATOR = "/"


@dataclass(frozen=True)
class StorageObjectRef:
    """A blob inside a container.

    Invocation arguments carry blob bindings as ``"container/blob"``.
    Only values with exactly one separator and two non-empty parts are
    considered blob references.
    """

    container: str
    blob_name: str

    @classmethod
    def parse(cls, value: str | None) -> StorageObjectRef | None:
        """Split a ``container/blob`` argument value.

        Returns None for anything that is not exactly two non-empty
        components. Values such as ``"onlyname"`` or ``"a/b/c"`` are
        simply not blob references.
        """
        if value is None:
            return None
        components = value.split(_SEPARATOR)
        if len(components) != 2:
            return None
        container, blob_name = components
        if not container or not blob_name:
            return None
        return cls(container=container, blob_name=blob_name)

    def __str__(self) -> str:
        return f"{self.container}{_SEPARATOR}{self.blob_name}"


@dataclass(frozen=True)
class StoreLookup(Generic[T]):
    """Result of a single object store read.

    Invariants:
        - FOUND state requires a value
        - NOT_FOUND state requires None

    Example:
        lookup = store.download_text(ref)
        match lookup.state:
            case LookupState.FOUND:
                parse(lookup.value)
            case LookupState.NOT_FOUND:
                return None
    """

    state: LookupState
    value: T | None = None

    def __post_init__(self) -> None:
        if self.state == LookupState.FOUND and self.value is None:
            raise ValueError("FOUND state requires a value")
        if self.state == LookupState.NOT_FOUND and self.value is not None:
            raise ValueError("NOT_FOUND state requires None value")

    @classmethod
    def found(cls, value: T) -> StoreLookup[T]:
        return cls(state=LookupState.FOUND, value=value)

    @classmethod
    def not_found(cls) -> StoreLookup[T]:
        return cls(state=LookupState.NOT_FOUND)

    @property
    def is_found(self) -> bool:
        return self.state == LookupState.FOUND
