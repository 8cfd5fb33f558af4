from .ledger import LedgerService
from .repository import LedgerRepository
from .sheets import GoogleSheetsClient, SheetStore

__all__ = ["GoogleSheetsClient", "LedgerRepository", "LedgerService", "SheetStore"]
