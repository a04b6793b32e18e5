"""
Row normalisation: cell cleanup, date and money parsing, canonical records.
"""
from __future__ import annotations

import datetime as dt
import hashlib
import re
from typing import Optional

from app.config import (
    DEFAULT_OPERATOR, DEFAULT_CLIENT, DEFAULT_PACKAGE, DEFAULT_CATEGORY, DEFAULT_STATUS,
)
from app.data.detect import ColumnMap
from app.data.economics import resolve_economics
from app.data.schemas import Transaction

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

def clean_value(raw: str | None) -> str:
    """Trim and drop every double-quote character."""
    if not raw:
        return ""
    return raw.strip().replace('"', "")


def cell(cells: list[str], idx: Optional[int]) -> str:
    """Cell at `idx`, or "" when the column is absent or the row is short."""
    if idx is None or idx >= len(cells):
        return ""
    return cells[idx]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def normalize_date(raw: str | None, today: Optional[dt.date] = None) -> str:
    """Normalise to YYYY-MM-DD.

    Accepts "YYYY-MM-DD", "DD/MM/YYYY" and either one followed by a
    comma- or space-separated time. Anything else passes through as-is.
    Empty input means the processing date.
    """
    if not raw:
        return (today or dt.date.today()).isoformat()

    clean = raw
    if "," in raw:
        clean = raw.split(",", 1)[0].strip()
    elif " " in raw and ":" in raw:
        clean = raw.split(" ", 1)[0].strip()

    if "/" in clean:
        parts = clean.split("/")
        if len(parts) == 3:
            day, month, year = parts
            return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return clean.split("T", 1)[0]


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

def parse_money(raw: str | None) -> float:
    """Parse a decimal-comma or decimal-point amount; 0.0 when unparsable.

    Only the first comma is treated as a decimal separator, so thousands
    separators are not understood ("1.234,56" -> 1.234).
    """
    clean = clean_value(raw).replace(",", ".", 1)
    m = _NUMBER_RE.match(clean)
    if not m:
        return 0.0
    return float(m.group(0))


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

def row_id(row_number: int, raw_line: str) -> str:
    """Deterministic id from the row's position and content."""
    return hashlib.sha1(f"{row_number}:{raw_line}".encode("utf-8")).hexdigest()[:12]


def split_row(line: str, delimiter: str) -> list[str]:
    return [clean_value(v) for v in line.split(delimiter)]


def normalize_row(
    cells: list[str],
    columns: ColumnMap,
    *,
    row_number: int,
    raw_line: str,
    today: Optional[dt.date] = None,
) -> Transaction:
    """Build the canonical Transaction for one data row."""
    package = cell(cells, columns.package) or DEFAULT_PACKAGE
    sale = parse_money(cell(cells, columns.sale_value))
    economics = resolve_economics(
        package,
        sale,
        parse_money(cell(cells, columns.cost)),
        parse_money(cell(cells, columns.profit)),
        has_economics=columns.has_economics,
    )

    return Transaction(
        id=row_id(row_number, raw_line),
        date=normalize_date(cell(cells, columns.date), today),
        operator=cell(cells, columns.operator) or DEFAULT_OPERATOR,
        client=cell(cells, columns.client) or DEFAULT_CLIENT,
        package=package,
        category=cell(cells, columns.category) or DEFAULT_CATEGORY,
        sale_value=sale,
        cost=economics.cost,
        profit=economics.profit,
        status=cell(cells, columns.status) or DEFAULT_STATUS,
    )
