from __future__ import annotations

import re
from typing import Any, Optional

import httpx
import pytest

from ..core.config import Settings
from ..services import LedgerRepository, LedgerService
from ..services.codec import HEADER_ROW

_A1_RANGE = re.compile(r"^[^!]+!(?P<c1>[A-Z]+)(?P<r1>\d*):(?P<c2>[A-Z]+)(?P<r2>\d*)$")


def _row_bounds(range_: str) -> tuple[int, Optional[int], bool]:
    """Zero-based start row, exclusive end row and single-column flag."""
    match = _A1_RANGE.match(range_)
    assert match, f"unsupported range {range_}"
    start = int(match["r1"]) - 1 if match["r1"] else 0
    end = int(match["r2"]) if match["r2"] else None
    return start, end, match["c1"] == match["c2"]


class FakeSheet:
    """In-memory stand-in for a single Google Sheets tab.

    ``grid`` holds every physical row, header included. Set ``failing`` to
    make every call raise like an unreachable API.
    """

    def __init__(self, rows: Optional[list[list[Any]]] = None, header: bool = True) -> None:
        self.grid: list[list[Any]] = []
        if header or rows:
            self.grid.append(list(HEADER_ROW))
        self.grid.extend(list(row) for row in rows or [])
        self.calls: list[tuple[str, str]] = []
        self.failing = False

    def _record(self, action: str, range_: str) -> None:
        self.calls.append((action, range_))
        if self.failing:
            raise httpx.ConnectError("sheets unreachable")

    @property
    def data_rows(self) -> list[list[Any]]:
        return self.grid[1:]

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "read"]

    async def read_range(self, range_: str) -> list[list[Any]]:
        self._record("read", range_)
        start, end, single_column = _row_bounds(range_)
        rows = self.grid[start:end]
        if single_column:
            return [row[:1] for row in rows]
        return [list(row) for row in rows]

    async def clear_range(self, range_: str) -> None:
        self._record("clear", range_)
        start, end, _ = _row_bounds(range_)
        del self.grid[start:end]

    async def write_range(self, range_: str, rows: list[list[Any]]) -> None:
        self._record("write", range_)
        start, _, _ = _row_bounds(range_)
        while len(self.grid) < start + len(rows):
            self.grid.append([])
        for offset, row in enumerate(rows):
            self.grid[start + offset] = list(row)

    async def append_rows(self, range_: str, rows: list[list[Any]]) -> None:
        self._record("append", range_)
        self.grid.extend(list(row) for row in rows)


def make_row(transaction_id: Any, deleted: Any = False, **overrides: Any) -> list[Any]:
    row = [
        transaction_id,
        overrides.get("date", "2024-01-01"),
        overrides.get("type", "expense"),
        overrides.get("partner", "Alice"),
        overrides.get("description", "lunch"),
        overrides.get("amount", 12.5),
        deleted,
        overrides.get("created_at", "2024-01-01T09:00:00.000Z"),
        overrides.get("updated_at", "2024-01-01T09:00:00.000Z"),
        overrides.get("created_timestamp", 1704099600000),
        overrides.get("updated_timestamp", 1704099600000),
    ]
    return row


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        google_sheet_id="test-sheet-id",
        google_client_email="ledger@test-project.iam.gserviceaccount.com",
        google_private_key="test-private-key",
    )


@pytest.fixture
def sheet() -> FakeSheet:
    return FakeSheet()


@pytest.fixture
def repository(sheet: FakeSheet, settings: Settings) -> LedgerRepository:
    return LedgerRepository(sheet, settings)


@pytest.fixture
def service(repository: LedgerRepository) -> LedgerService:
    return LedgerService(repository)
