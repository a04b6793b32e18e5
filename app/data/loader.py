"""
CSV text ingestion, inbox discovery, and the pandas view of a record set.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from app.config import INBOX_FOLDER
from app.data.detect import detect_schema
from app.data.normalize import normalize_row, split_row
from app.data.schemas import Transaction, parse_day

FRAME_COLUMNS = [
    "id", "date", "operator", "client", "package", "category",
    "sale_value", "cost", "profit", "status",
]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_csv(text: str, today: Optional[dt.date] = None) -> list[Transaction]:
    """Parse a whole CSV export into canonical transactions.

    Returns an empty list when the text has no data rows; callers treat
    that as "file empty or malformed", not as a valid empty dataset.
    """
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return []

    schema = detect_schema(lines[0])
    transactions: list[Transaction] = []
    for row_number, line in enumerate(lines[1:], start=1):
        current = line.strip()
        if not current:
            continue
        cells = split_row(current, schema.delimiter)
        transactions.append(normalize_row(
            cells,
            schema.columns,
            row_number=row_number,
            raw_line=current,
            today=today,
        ))
    return transactions


def read_csv_text(filepath: Path) -> str:
    """Read an export as UTF-8 (BOM tolerated), falling back to latin-1."""
    raw = Path(filepath).read_bytes()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def load_csv(filepath: Path, today: Optional[dt.date] = None) -> list[Transaction]:
    """Load and parse one CSV file from disk."""
    return parse_csv(read_csv_text(filepath), today=today)


# ---------------------------------------------------------------------------
# CSV discovery
# ---------------------------------------------------------------------------

def discover_csvs(inbox: Path = INBOX_FOLDER) -> list[Path]:
    """Find CSVs in the inbox, most recently modified first."""
    if not inbox.exists():
        return []
    matches = list(inbox.rglob("*.csv"))
    matches.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return matches


# ---------------------------------------------------------------------------
# DataFrame view
# ---------------------------------------------------------------------------

def to_frame(records: Sequence[Transaction]) -> pd.DataFrame:
    """One row per transaction, in input order, plus a parsed sale_date."""
    df = pd.DataFrame([t.to_dict() for t in records], columns=FRAME_COLUMNS)
    df["sale_value"] = df["sale_value"].astype(float)
    df["cost"] = df["cost"].astype(float)
    df["profit"] = df["profit"].astype(float)
    df["sale_date"] = df["date"].map(parse_day)
    return df
