from .schemas import (
    LEDGER_VERSION,
    DebugResponse,
    LedgerSnapshot,
    Transaction,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)

__all__ = [
    "LEDGER_VERSION",
    "DebugResponse",
    "LedgerSnapshot",
    "Transaction",
    "TransactionCreate",
    "TransactionResponse",
    "TransactionUpdate",
]
