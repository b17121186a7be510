"""Status codes and kinds used across subsystem boundaries.

Values are the strings that appear in rendered reports and JSON output.
"""

from enum import StrEnum


class OwnershipStatus(StrEnum):
    """Outcome of resolving which invocation wrote a blob.

    Values:
        OWNED: Blob carries an owner invocation id
        NO_RECORD: Blob exists but was written without causality metadata
        MISSING: Blob does not exist in storage
    """

    OWNED = "owned"
    NO_RECORD = "no_record"
    MISSING = "missing"


class LookupState(StrEnum):
    """Discriminator for object store reads.

    NOT_FOUND covers every routine absence the store can report
    (missing blob, missing or invalid container). Other failures are
    raised, never folded into a state.
    """

    FOUND = "found"
    NOT_FOUND = "not_found"


class ParameterLogType(StrEnum):
    """Wire tag for parameter log records (the ``Type`` field)."""

    READ_BLOB = "ReadBlob"
    TABLE = "Table"
    BINDER = "Binder"
    TEXT = "Text"
