"""Blob ownership and argument display models.

These types answer: "Who wrote this blob, and how should the argument
bound to it be shown?"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jobsight.contracts.enums import OwnershipStatus
from jobsight.contracts.identity import NIL_INVOCATION_ID, InvocationId
from jobsight.contracts.storage import StorageObjectRef


@dataclass(frozen=True)
class OwnershipRecord:
    """Resolved relationship between a blob and the invocation that wrote it.

    Invariants:
        - OWNED requires a non-nil owner_id
        - NO_RECORD carries NIL_INVOCATION_ID, so comparisons against a real
          invocation id are always false
        - MISSING carries no owner_id
    """

    status: OwnershipStatus
    owner_id: InvocationId | None

    def __post_init__(self) -> None:
        if self.status == OwnershipStatus.OWNED:
            if self.owner_id is None or self.owner_id == NIL_INVOCATION_ID:
                raise ValueError("OWNED status requires a non-nil owner_id")
        elif self.status == OwnershipStatus.NO_RECORD:
            if self.owner_id != NIL_INVOCATION_ID:
                raise ValueError("NO_RECORD status requires the nil owner_id")
        elif self.owner_id is not None:
            raise ValueError(f"{self.status} status requires None owner_id")

    @classmethod
    def owned(cls, owner_id: InvocationId) -> OwnershipRecord:
        return cls(status=OwnershipStatus.OWNED, owner_id=owner_id)

    @classmethod
    def no_record(cls) -> OwnershipRecord:
        return cls(status=OwnershipStatus.NO_RECORD, owner_id=NIL_INVOCATION_ID)

    @classmethod
    def missing(cls) -> OwnershipRecord:
        return cls(status=OwnershipStatus.MISSING, owner_id=None)

    def written_by(self, invocation_id: InvocationId) -> bool:
        """True only for OWNED with this exact owner; NO_RECORD never matches."""
        return self.status == OwnershipStatus.OWNED and self.owner_id == invocation_id


@dataclass(frozen=True)
class ArgumentDisplayModel:
    """Display model for an invocation argument bound to a blob.

    Fields:
        ref: The blob the argument is bound to
        is_output: Argument was written (not read) by the invocation
        is_missing: Blob does not exist in storage
        owner_id: Writer invocation id; NIL_INVOCATION_ID when the blob has
            no causality metadata, None when the blob is missing
        is_self_owned: Blob was written by the invocation being displayed
    """

    ref: StorageObjectRef
    is_output: bool
    is_missing: bool
    owner_id: InvocationId | None
    is_self_owned: bool

    def __post_init__(self) -> None:
        if self.is_missing and (self.owner_id is not None or self.is_self_owned):
            raise ValueError("A missing blob cannot carry an owner")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "container": self.ref.container,
            "blob_name": self.ref.blob_name,
            "is_output": self.is_output,
            "is_missing": self.is_missing,
            "owner_id": str(self.owner_id) if self.owner_id is not None else None,
            "is_self_owned": self.is_self_owned,
        }
