"""
Transaction table helpers: free-text search, column sort, pagination.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from app.config import ROWS_PER_PAGE
from app.data.schemas import SortDirection, SortField, Transaction


@dataclass(frozen=True)
class Page:
    items: list[Transaction]
    page: int
    per_page: int
    total: int
    total_pages: int


def search_transactions(records: Sequence[Transaction], term: str | None) -> list[Transaction]:
    """Case-insensitive substring search over client, package, operator, category."""
    if not term:
        return list(records)
    needle = term.lower()
    return [
        t for t in records
        if needle in t.client.lower()
        or needle in t.package.lower()
        or needle in t.operator.lower()
        or needle in t.category.lower()
    ]


def sort_transactions(
    records: Sequence[Transaction],
    field: SortField = SortField.DATE,
    direction: SortDirection = SortDirection.DESC,
) -> list[Transaction]:
    """Stable sort on one column; text columns compare case-insensitively."""
    accessor = field.accessor

    def key(t: Transaction):
        value = accessor(t)
        return value.lower() if isinstance(value, str) else value

    return sorted(records, key=key, reverse=direction == SortDirection.DESC)


def paginate(records: Sequence[Transaction], page: int = 1, per_page: int = ROWS_PER_PAGE) -> Page:
    """Slice one page; pages past the end clamp to the last page."""
    total = len(records)
    per_page = max(per_page, 1)
    total_pages = max(math.ceil(total / per_page), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(list(records[start:start + per_page]), page, per_page, total, total_pages)
