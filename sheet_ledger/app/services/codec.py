"""Row codec between ``Transaction`` models and raw sheet rows.

Sheet cells are untyped and hand-editable, so decoding never raises: every
column has a fallback and a malformed row still yields a transaction.

Column order (one row per transaction)::

    id, date, type, partner, description, amount, deleted,
    createdAt, updatedAt, createdTimestamp, updatedTimestamp
"""

from __future__ import annotations

import logging
import math
import re
from datetime import UTC, datetime
from typing import Any, Optional, Sequence

from ..models import Transaction

logger = logging.getLogger(__name__)

HEADER_ROW = [
    "ID",
    "Date",
    "Type",
    "Partner",
    "Description",
    "Amount",
    "Deleted",
    "Created At",
    "Updated At",
    "Created Timestamp",
    "Updated Timestamp",
]

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def isoformat_millis(moment: datetime) -> str:
    """``2024-01-01T12:00:00.000Z``, the format written to the sheet."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def now_iso() -> str:
    return isoformat_millis(datetime.now(UTC))


def now_millis() -> int:
    return epoch_millis(datetime.now(UTC))


def parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a cell, ``None`` when there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _INT_PREFIX.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # digit count above sys.get_int_max_str_digits()
        return None


def parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        match = _FLOAT_PREFIX.match(str(value))
        if not match:
            return None
        value = match.group(1)
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return str(value)


def decode_row(row: Any, index: int) -> Transaction:
    """Build a transaction from a sheet row at zero-based data position ``index``.

    A missing or unparseable id falls back to ``index + 1``, so ids of
    corrupted rows are not stable across reloads if rows move.
    """
    cells: Sequence[Any] = row if isinstance(row, (list, tuple)) else ()

    raw_id = _cell(cells, 0)
    parsed_id = parse_int(raw_id)
    transaction_id = parsed_id if parsed_id is not None else index + 1
    logger.debug(
        "Row %d: id cell %r (%s) parsed as %d",
        index, raw_id, type(raw_id).__name__, transaction_id,
    )

    raw_deleted = _cell(cells, 6)
    return Transaction(
        id=transaction_id,
        date=_text(_cell(cells, 1)),
        type=_text(_cell(cells, 2)),
        partner=_text(_cell(cells, 3)),
        description=_text(_cell(cells, 4)),
        amount=parse_float(_cell(cells, 5)) or 0,
        deleted=raw_deleted == "TRUE" or raw_deleted is True,
        created_at=_text(_cell(cells, 7)) or now_iso(),
        updated_at=_text(_cell(cells, 8)) or now_iso(),
        created_timestamp=parse_int(_cell(cells, 9)) or now_millis(),
        updated_timestamp=parse_int(_cell(cells, 10)) or now_millis(),
    )


def encode_row(transaction: Transaction) -> list[Any]:
    """Flatten a transaction into the fixed eleven-column layout."""
    try:
        row_id: Any = int(transaction.id)
    except (TypeError, ValueError):
        # Written anyway; the next load will fall back to a positional id.
        logger.error("Invalid id for transaction: %r", transaction.id)
        row_id = transaction.id

    row = [
        row_id,
        transaction.date,
        transaction.type,
        transaction.partner,
        transaction.description,
        transaction.amount,
        transaction.deleted,
        transaction.created_at,
        transaction.updated_at,
        transaction.created_timestamp,
        transaction.updated_timestamp,
    ]
    logger.debug("Encoded transaction %r as row %r", row_id, row)
    return row
