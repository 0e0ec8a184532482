class LedgerError(Exception):
    """Base class for errors raised by the ledger core."""


class ValidationError(LedgerError, ValueError):
    """A single operation was rejected; the store is unchanged."""


class ImportFormatError(LedgerError):
    """A backup blob is not a usable snapshot; the store is unchanged."""
