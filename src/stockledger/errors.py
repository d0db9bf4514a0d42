"""
Fatal failures surfaced to callers of the ingest and query operations.

Cell-level and row-level problems never raise: malformed values are
coerced, nameless rows are skipped and counted. Only these escape.
"""


class ProcessingError(Exception):
    """An ingest or query call could not be completed."""


class DecodeError(ProcessingError):
    """The uploaded file is not a readable table, or holds no sheet."""


class StoreUnavailableError(ProcessingError):
    """The catalog or ledger store could not be reached."""
