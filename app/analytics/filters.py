"""
Record-set filtering by operator and inclusive date interval.
"""
from __future__ import annotations

from typing import Sequence

from app.config import SELECT_ALL
from app.data.schemas import FilterCriteria, Transaction


def _matches_operator(t: Transaction, criteria: FilterCriteria) -> bool:
    return criteria.selects_all_operators or t.operator == criteria.operator


def _matches_dates(t: Transaction, criteria: FilterCriteria) -> bool:
    start, end = criteria.start_date, criteria.end_date
    if start is None and end is None:
        return True

    day = t.sale_date
    if day is None:
        # Best-effort dates that never parsed cannot satisfy a bound
        return False
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def filter_transactions(
    records: Sequence[Transaction],
    criteria: FilterCriteria | None = None,
) -> list[Transaction]:
    """Subset of `records` matching the criteria, in input order."""
    if criteria is None:
        return list(records)
    return [
        t for t in records
        if _matches_operator(t, criteria) and _matches_dates(t, criteria)
    ]


def available_operators(records: Sequence[Transaction]) -> list[str]:
    """Operator selector options: the select-all sentinel, then names A-Z."""
    return [SELECT_ALL] + sorted({t.operator for t in records} - {SELECT_ALL})
