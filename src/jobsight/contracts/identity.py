"""Invocation identifiers.

These types answer: "Which execution are we talking about?"
"""

from uuid import UUID

InvocationId = UUID

# Owner id reported for blobs written without causality metadata.
NIL_INVOCATION_ID: InvocationId = UUID(int=0)


def parse_invocation_id(value: str | None) -> InvocationId | None:
    """Parse an invocation id from blob metadata or user input.

    Returns None for a missing, malformed, or nil value. Metadata is
    written by the execution engine, so a value we cannot read is treated
    the same as no value at all.
    """
    if value is None:
        return None
    try:
        parsed = UUID(value.strip())
    except ValueError:
        return None
    if parsed == NIL_INVOCATION_ID:
        return None
    return parsed
