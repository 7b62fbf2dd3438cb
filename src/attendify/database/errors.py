class StoreError(Exception):
    """Any failure of the relational store that is not a sentinel below."""


class RecordNotFound(StoreError):
    """The lookup matched no rows."""


class DuplicateKey(StoreError):
    """A unique index rejected the write."""


class ForeignKeyViolation(StoreError):
    """The write references a row that does not exist."""
