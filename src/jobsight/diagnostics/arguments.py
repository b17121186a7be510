"""Display models for blob-bound invocation arguments."""

from __future__ import annotations

from jobsight.contracts import ArgumentDisplayModel, InvocationId, OwnershipStatus, StorageObjectRef
from jobsight.diagnostics.causality import CausalityResolver


class ArgumentModelBuilder:
    """Combine an argument's blob ownership with the current invocation id."""

    def __init__(self, resolver: CausalityResolver) -> None:
        self._resolver = resolver

    def build_model(
        self,
        raw_value: str | None,
        current_invocation_id: InvocationId,
        *,
        is_output: bool,
    ) -> ArgumentDisplayModel | None:
        """Build the display model for one argument value.

        Returns None when the value is not a ``container/blob`` reference;
        such arguments are shown without ownership information.
        """
        ref = StorageObjectRef.parse(raw_value)
        if ref is None:
            return None

        record = self._resolver.resolve_owner(ref)
        if record.status == OwnershipStatus.MISSING:
            return ArgumentDisplayModel(
                ref=ref,
                is_output=is_output,
                is_missing=True,
                owner_id=None,
                is_self_owned=False,
            )

        # NO_RECORD keeps the nil owner id but is never self-owned
        return ArgumentDisplayModel(
            ref=ref,
            is_output=is_output,
            is_missing=False,
            owner_id=record.owner_id,
            is_self_owned=record.written_by(current_invocation_id),
        )
