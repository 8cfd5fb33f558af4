class TransactionNotFoundError(Exception):
    """Raised when a transaction id is missing from the visible ledger."""


class LedgerPersistenceError(Exception):
    """Raised when a mutated ledger snapshot could not be written back."""
