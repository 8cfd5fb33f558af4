from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LEDGER_VERSION = "1.0"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Transaction(_CamelModel):
    id: int
    date: str = ""
    type: str = ""
    partner: str = ""
    description: str = ""
    amount: float = 0
    deleted: bool = Field(default=False, description="Soft-delete flag; deleted rows are hidden on load")
    created_at: str
    updated_at: str
    created_timestamp: int = Field(..., description="Epoch milliseconds mirror of created_at")
    updated_timestamp: int = Field(..., description="Epoch milliseconds mirror of updated_at")


class LedgerSnapshot(_CamelModel):
    transactions: list[Transaction] = Field(default_factory=list)
    next_id: int = 1
    last_updated: str
    version: str = LEDGER_VERSION


class TransactionCreate(BaseModel):
    date: str = ""
    type: str = ""
    partner: str = ""
    description: str = ""
    amount: float = 0


class TransactionUpdate(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    partner: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None


class TransactionResponse(BaseModel):
    message: str
    transaction: Transaction


class DebugResponse(BaseModel):
    message: str
    summary: Optional[dict[str, Any]] = None
