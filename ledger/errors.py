class LedgerError(ValueError):
    """Base class for errors caused by user input or imported files."""


class ValidationError(LedgerError):
    """A transaction entry was rejected before reaching the collection."""


class FormatError(LedgerError):
    """An import payload or snapshot does not have the expected shape."""
