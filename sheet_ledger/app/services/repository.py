from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.config import Settings
from ..models import LedgerSnapshot, Transaction
from .codec import HEADER_ROW, decode_row, encode_row, now_iso, parse_int
from .sheets import SheetStore


logger = logging.getLogger(__name__)


class LedgerRepository:
    """Snapshot persistence on top of a ``SheetStore``.

    None of the public methods raise: a missing configuration or a failed
    remote call is logged and turned into an empty snapshot, ``False`` or
    ``None``.
    """

    def __init__(self, store: SheetStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------
    @property
    def _sheet(self) -> str:
        return self.settings.sheet_name

    @property
    def _data_range(self) -> str:
        return f"{self._sheet}!A2:K"

    @property
    def _full_range(self) -> str:
        return f"{self._sheet}!A:K"

    @property
    def _header_range(self) -> str:
        return f"{self._sheet}!A1:K1"

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------
    def is_configured(self) -> bool:
        required = (
            ("GOOGLE_SHEET_ID", self.settings.google_sheet_id),
            ("GOOGLE_CLIENT_EMAIL", self.settings.google_client_email),
            ("GOOGLE_PRIVATE_KEY", self.settings.google_private_key),
        )
        for env_name, value in required:
            if not value:
                logger.warning("%s not set", env_name)
                return False

        logger.debug(
            "Google Sheets credentials: sheet id set, client email set, "
            "private key set (length %d)",
            len(self.settings.google_private_key or ""),
        )
        return True

    # ------------------------------------------------------------------
    # Snapshot load / save
    # ------------------------------------------------------------------
    async def load(self) -> LedgerSnapshot:
        if not self.is_configured():
            logger.info("Google Sheets not configured, falling back to an empty ledger")
            return LedgerSnapshot(last_updated=now_iso())

        try:
            rows = await self.store.read_range(self._data_range)
            logger.info("Loaded %d rows from Google Sheets", len(rows))
            transactions = [decode_row(row, index) for index, row in enumerate(rows)]
            # Soft-deleted ids count too so they are never handed out again
            next_id = max([0, *(t.id for t in transactions)]) + 1
        except Exception:
            logger.exception("Error loading ledger from Google Sheets")
            return LedgerSnapshot(last_updated=now_iso())

        logger.debug("Calculated next id %d from %d transactions", next_id, len(transactions))
        return LedgerSnapshot(
            transactions=[t for t in transactions if not t.deleted],
            next_id=next_id,
            last_updated=now_iso(),
        )

    async def save(self, snapshot: LedgerSnapshot) -> bool:
        """Replace the whole sheet with ``snapshot``.

        Rows that were soft-deleted before the snapshot was loaded are not
        part of it, so they disappear from the sheet here.
        """
        if not self.is_configured():
            logger.info("Google Sheets not configured, skipping save")
            return False

        try:
            rows = [encode_row(t) for t in snapshot.transactions]
            logger.info("Saving %d transactions to Google Sheets", len(rows))
            await self.store.clear_range(self._full_range)
            await self.store.write_range(self._header_range, [list(HEADER_ROW)])
            if rows:
                await self.store.write_range(self._data_range, rows)
        except Exception:
            logger.exception("Error saving ledger to Google Sheets")
            return False
        return True

    # ------------------------------------------------------------------
    # Targeted writes
    # ------------------------------------------------------------------
    async def append_transaction(self, transaction: Transaction) -> bool:
        """Append one row below the existing data without rewriting the sheet."""
        if not self.is_configured():
            logger.info("Google Sheets not configured, skipping append")
            return False

        try:
            await self.store.append_rows(self._full_range, [encode_row(transaction)])
        except Exception:
            logger.exception("Error appending transaction %s to Google Sheets", transaction.id)
            return False
        return True

    async def update_transaction_row(self, transaction: Transaction) -> bool:
        """Rewrite the single row whose id cell matches ``transaction.id``."""
        if not self.is_configured():
            logger.info("Google Sheets not configured, skipping row update")
            return False

        try:
            id_cells = await self.store.read_range(f"{self._sheet}!A:A")
            row_number: Optional[int] = None
            for index, row in enumerate(id_cells):
                if index == 0 or not row:
                    continue
                if parse_int(row[0]) == transaction.id:
                    row_number = index + 1
                    break

            if row_number is None:
                logger.error("Transaction %s not found in sheet", transaction.id)
                return False

            await self.store.write_range(
                f"{self._sheet}!A{row_number}:K{row_number}",
                [encode_row(transaction)],
            )
        except Exception:
            logger.exception("Error updating transaction %s in Google Sheets", transaction.id)
            return False
        return True

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    async def describe_sheet(self) -> Optional[dict[str, Any]]:
        """Log what is physically stored in the sheet. Read-only."""
        if not self.settings.google_sheet_id or not self.settings.google_client_email:
            logger.info("Google Sheets not configured")
            return None

        try:
            rows = await self.store.read_range(self._full_range)
        except Exception:
            logger.exception("Error reading Google Sheet for diagnostics")
            return None

        header = rows[0] if rows else None
        first_row = rows[1] if len(rows) > 1 else None
        logger.info("Sheet diagnostics: %d rows", len(rows))
        logger.info("Raw rows: %r", rows)
        if header is not None:
            logger.info("Header: %r", header)
        if first_row:
            logger.info(
                "First data row: %r (id cell %r, type %s)",
                first_row, first_row[0], type(first_row[0]).__name__,
            )
        return {"row_count": len(rows), "header": header, "first_row": first_row}
