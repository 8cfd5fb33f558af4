from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Optional

from ..core.errors import LedgerPersistenceError, TransactionNotFoundError
from ..models import (
    LedgerSnapshot,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)
from .codec import epoch_millis, isoformat_millis
from .repository import LedgerRepository


logger = logging.getLogger(__name__)


class LedgerService:
    """Load -> mutate -> save cycles over the sheet-backed ledger.

    Every call works on its own freshly loaded snapshot. There is no locking:
    two concurrent writers both replace the whole sheet and the last one wins.
    """

    def __init__(self, repository: LedgerRepository) -> None:
        self.repository = repository

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _find(self, snapshot: LedgerSnapshot, transaction_id: int) -> Transaction:
        for transaction in snapshot.transactions:
            if transaction.id == transaction_id:
                return transaction
        raise TransactionNotFoundError("Transaction not found")

    def _touch(self, snapshot: LedgerSnapshot, transaction: Transaction, now: datetime) -> None:
        transaction.updated_at = isoformat_millis(now)
        transaction.updated_timestamp = epoch_millis(now)
        snapshot.last_updated = transaction.updated_at

    async def _persist(self, snapshot: LedgerSnapshot, failure_message: str) -> None:
        if not await self.repository.save(snapshot):
            raise LedgerPersistenceError(failure_message)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def list_transactions(self) -> LedgerSnapshot:
        return await self.repository.load()

    async def create(
        self,
        payload: TransactionCreate,
        now: Optional[datetime] = None,
    ) -> Transaction:
        snapshot = await self.repository.load()
        now = now or datetime.now(UTC)
        stamp = isoformat_millis(now)
        millis = epoch_millis(now)

        transaction = Transaction(
            **payload.model_dump(),
            id=snapshot.next_id,
            deleted=False,
            created_at=stamp,
            updated_at=stamp,
            created_timestamp=millis,
            updated_timestamp=millis,
        )
        snapshot.next_id += 1
        snapshot.transactions.append(transaction)
        snapshot.last_updated = stamp

        await self._persist(snapshot, "Failed to persist transaction")
        logger.info(
            "transaction.created",
            extra={"transaction_id": transaction.id, "amount": transaction.amount},
        )
        return transaction

    async def update(
        self,
        transaction_id: int,
        payload: TransactionUpdate,
        now: Optional[datetime] = None,
    ) -> Transaction:
        snapshot = await self.repository.load()
        transaction = self._find(snapshot, transaction_id)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(transaction, field, value)
        self._touch(snapshot, transaction, now or datetime.now(UTC))

        await self._persist(snapshot, "Failed to persist transaction update")
        logger.info(
            "transaction.updated",
            extra={
                "transaction_id": transaction.id,
                "fields": sorted(changes),
            },
        )
        return transaction

    async def delete(
        self,
        transaction_id: int,
        now: Optional[datetime] = None,
    ) -> Transaction:
        snapshot = await self.repository.load()
        transaction = self._find(snapshot, transaction_id)

        # Still written with this save; hidden from the next load onwards
        transaction.deleted = True
        self._touch(snapshot, transaction, now or datetime.now(UTC))

        await self._persist(snapshot, "Failed to persist transaction deletion")
        logger.info("transaction.deleted", extra={"transaction_id": transaction.id})
        return transaction
