from functools import lru_cache

from fastapi import Depends

from ..services import GoogleSheetsClient, LedgerRepository, LedgerService, SheetStore
from .config import Settings, get_settings


@lru_cache(maxsize=1)
def get_sheet_store() -> GoogleSheetsClient:
    settings = get_settings()
    return GoogleSheetsClient(
        spreadsheet_id=settings.google_sheet_id or "",
        service_account_info=settings.service_account_info(),
        timeout=settings.sheets_timeout,
    )


def get_ledger_repository(
    store: SheetStore = Depends(get_sheet_store),
    settings: Settings = Depends(get_settings),
) -> LedgerRepository:
    return LedgerRepository(store, settings)


def get_ledger_service(
    repository: LedgerRepository = Depends(get_ledger_repository),
) -> LedgerService:
    return LedgerService(repository)
