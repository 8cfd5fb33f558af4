from fastapi import APIRouter, Depends, status

from ..core.dependencies import get_ledger_repository, get_ledger_service
from ..models import (
    DebugResponse,
    LedgerSnapshot,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from ..services import LedgerRepository, LedgerService


router = APIRouter(prefix="/transactions", tags=["transactions"])

@router.get("", response_model=LedgerSnapshot)
async def list_transactions(
    service: LedgerService = Depends(get_ledger_service),
) -> LedgerSnapshot:
    return await service.list_transactions()

@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: TransactionCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    transaction = await service.create(payload)
    return TransactionResponse(message="Transaction added successfully", transaction=transaction)

@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    payload: TransactionUpdate,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    transaction = await service.update(transaction_id, payload)
    return TransactionResponse(message="Transaction updated successfully", transaction=transaction)

@router.delete("/{transaction_id}", response_model=TransactionResponse)
async def delete_transaction(
    transaction_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    transaction = await service.delete(transaction_id)
    return TransactionResponse(message="Transaction marked as deleted", transaction=transaction)

debug_router = APIRouter(prefix="/debug", tags=["diagnostics"])

@debug_router.post("", response_model=DebugResponse)
async def debug_sheet(
    repository: LedgerRepository = Depends(get_ledger_repository),
) -> DebugResponse:
    summary = await repository.describe_sheet()
    return DebugResponse(message="Debug triggered", summary=summary)

__all__ = ["router", "debug_router"]
