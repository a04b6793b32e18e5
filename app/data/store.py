"""
DataStore — the session's in-memory record set.

Loaded once at startup (newest CSV in the inbox) and replaced wholesale on
every upload. Filtering and aggregation always produce new values; the
stored transactions are never mutated.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional

import pandas as pd

from app.config import INBOX_FOLDER
from app.data.loader import discover_csvs, load_csv, parse_csv, to_frame
from app.data.schemas import DashboardStats, FilterCriteria, Transaction


class DataStore:
    """In-memory transactions with criteria-filtered accessors."""

    def __init__(self) -> None:
        self.transactions: list[Transaction] = []
        self.df: pd.DataFrame = to_frame([])
        self.source_name: Optional[str] = None
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _replace(self, transactions: list[Transaction], source_name: str | None) -> None:
        self.transactions = transactions
        self.df = to_frame(transactions)
        self.source_name = source_name
        self._loaded = True

    def accept(self, transactions: list[Transaction], source_name: str | None = None) -> int:
        """Swap in an already parsed record set. Returns its size."""
        self._replace(transactions, source_name)
        print(f"  Loaded {len(transactions):,} transactions from {source_name or 'upload'}")
        return len(transactions)

    def load_text(self, text: str, source_name: str | None = None, today: dt.date | None = None) -> int:
        """Parse CSV text and swap it in. Returns the row count (0 = rejected).

        An empty parse leaves the current record set untouched.
        """
        transactions = parse_csv(text, today=today)
        if not transactions:
            print(f"  Rejected {source_name or 'upload'}: empty or malformed CSV")
            return 0
        return self.accept(transactions, source_name)

    def load_file(self, filepath: Path, today: dt.date | None = None) -> int:
        """Load one CSV file from disk. Returns the row count (0 = rejected)."""
        transactions = load_csv(filepath, today=today)
        if not transactions:
            print(f"  Rejected {filepath.name}: empty or malformed CSV")
            return 0
        return self.accept(transactions, filepath.name)

    def load(self, inbox: Path = INBOX_FOLDER) -> "DataStore":
        """Load the most recent CSV in the inbox.

        With no CSV, or when the newest one is unreadable or malformed, the
        store is emptied.
        """
        print("Loading sales data...")
        files = discover_csvs(inbox)
        rows = 0
        if not files:
            print("  No CSVs found, starting with empty dataset")
        else:
            try:
                rows = self.load_file(files[0])
            except OSError as exc:
                print(f"  Warning: skipping {files[0].name}: {exc}")
        if rows == 0:
            self._replace([], None)
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Filtering / stats
    # ------------------------------------------------------------------

    def filtered(self, criteria: FilterCriteria | None = None) -> list[Transaction]:
        from app.analytics.filters import filter_transactions
        return filter_transactions(self.transactions, criteria)

    def stats(self, criteria: FilterCriteria | None = None) -> DashboardStats:
        from app.analytics.dashboard import calculate_stats
        return calculate_stats(self.filtered(criteria))

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def operators(self) -> list[str]:
        """Operator selector options (select-all first)."""
        from app.analytics.filters import available_operators
        return available_operators(self.transactions)

    def date_range(self, criteria: FilterCriteria | None = None) -> str:
        """Human-readable date range string."""
        rows = self.filtered(criteria)
        if not rows:
            return "N/A"
        dates = sorted(t.date for t in rows)
        return f"{dates[0]} to {dates[-1]}"

    def row_count(self) -> int:
        return len(self.transactions)
