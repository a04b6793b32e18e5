"""
FastAPI dependencies — DataStore singleton, filter criteria parsing.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import HTTPException, Query

from app.config import SELECT_ALL
from app.data.store import DataStore
from app.data.schemas import DatePreset, FilterCriteria

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    """Return the store; 404 when no CSV has been ingested yet."""
    store = get_store_or_empty()
    if not store.transactions:
        raise HTTPException(404, "No data loaded. Upload a CSV first.")
    return store


def get_store_or_empty() -> DataStore:
    """Return the store even if it has no data (for upload/health endpoints)."""
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Criteria parsing from query params
# ---------------------------------------------------------------------------

def _parse_date(value: Optional[str], name: str) -> Optional[dt.date]:
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise HTTPException(400, f"Invalid {name}: {value} (expected YYYY-MM-DD)")


def parse_criteria(
    operator: str = Query(SELECT_ALL, description="Operator name or 'Todos'"),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    preset: Optional[str] = Query(None, description="today|month|year|all (overrides dates)"),
) -> FilterCriteria:
    """Parse filter query parameters into FilterCriteria."""
    if preset is not None:
        try:
            return FilterCriteria.from_preset(DatePreset(preset), operator)
        except ValueError:
            raise HTTPException(400, f"Invalid preset: {preset}")

    return FilterCriteria(
        operator=operator,
        start_date=_parse_date(start_date, "start_date"),
        end_date=_parse_date(end_date, "end_date"),
    )
