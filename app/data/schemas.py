"""
Canonical record, filter criteria, dashboard snapshot, and field selectors.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Callable, Optional

from app.config import SELECT_ALL


def parse_day(value: str) -> Optional[dt.date]:
    """Calendar day of a Y-M-D string (zero padding optional), or None."""
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Canonical transaction
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transaction:
    """One normalized sales row. Never mutated after ingestion."""
    id: str
    date: str                # YYYY-MM-DD (best effort)
    operator: str
    client: str
    package: str
    category: str
    sale_value: float
    cost: float
    profit: float
    status: str

    @property
    def sale_date(self) -> Optional[dt.date]:
        """Calendar day of the sale, or None when `date` is not a Y-M-D day."""
        return parse_day(self.date)

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Filter criteria
# ---------------------------------------------------------------------------

class DatePreset(str, Enum):
    TODAY = "today"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


@dataclass
class FilterCriteria:
    """Operator selector plus an optional inclusive date interval."""
    operator: str = SELECT_ALL
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @classmethod
    def from_preset(
        cls,
        preset: DatePreset,
        operator: str = SELECT_ALL,
        today: Optional[dt.date] = None,
    ) -> "FilterCriteria":
        """Build criteria for one of the dashboard's quick date buttons."""
        today = today or dt.date.today()
        if preset == DatePreset.TODAY:
            return cls(operator, today, today)
        if preset == DatePreset.MONTH:
            return cls(operator, today.replace(day=1), today)
        if preset == DatePreset.YEAR:
            return cls(operator, dt.date(today.year, 1, 1), today)
        return cls(operator)

    @property
    def selects_all_operators(self) -> bool:
        return self.operator == SELECT_ALL

    @property
    def label(self) -> str:
        """Human-readable label for the criteria."""
        if self.start_date is None and self.end_date is None:
            return f"{self.operator} | All Time"
        s = self.start_date.isoformat() if self.start_date else "..."
        e = self.end_date.isoformat() if self.end_date else "..."
        return f"{self.operator} | {s} to {e}"


# ---------------------------------------------------------------------------
# Dashboard snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NamedCount:
    name: str
    value: int


@dataclass(frozen=True)
class TimePoint:
    date: str
    value: float    # revenue
    profit: float


@dataclass(frozen=True)
class ClientRank:
    name: str
    total_spent: float
    transactions: int


@dataclass(frozen=True)
class DashboardStats:
    """Derived statistics over a record set. No identity of its own."""
    total_revenue: float
    total_profit: float
    total_cost: float
    sales_count: int
    avg_ticket: float
    top_packages: list[NamedCount] = field(default_factory=list)
    top_operators: list[NamedCount] = field(default_factory=list)
    top_categories: list[NamedCount] = field(default_factory=list)
    status_distribution: list[NamedCount] = field(default_factory=list)
    revenue_over_time: list[TimePoint] = field(default_factory=list)
    top_clients: list[ClientRank] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "DashboardStats":
        return cls(0.0, 0.0, 0.0, 0, 0.0)

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Tagged field selectors
# ---------------------------------------------------------------------------

class GroupField(str, Enum):
    """Categorical fields that can be ranked with a top-N grouping."""
    PACKAGE = "package"
    OPERATOR = "operator"
    CATEGORY = "category"
    STATUS = "status"
    CLIENT = "client"

    @property
    def accessor(self) -> Callable[[Transaction], str]:
        return _GROUP_ACCESSORS[self]


class SortField(str, Enum):
    """Columns the transaction table can be sorted by."""
    DATE = "date"
    SALE_VALUE = "sale_value"
    PROFIT = "profit"
    CLIENT = "client"
    CATEGORY = "category"

    @property
    def accessor(self) -> Callable[[Transaction], object]:
        return _SORT_ACCESSORS[self]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_GROUP_ACCESSORS: dict[GroupField, Callable[[Transaction], str]] = {
    GroupField.PACKAGE: attrgetter("package"),
    GroupField.OPERATOR: attrgetter("operator"),
    GroupField.CATEGORY: attrgetter("category"),
    GroupField.STATUS: attrgetter("status"),
    GroupField.CLIENT: attrgetter("client"),
}

_SORT_ACCESSORS: dict[SortField, Callable[[Transaction], object]] = {
    SortField.DATE: attrgetter("date"),
    SortField.SALE_VALUE: attrgetter("sale_value"),
    SortField.PROFIT: attrgetter("profit"),
    SortField.CLIENT: attrgetter("client"),
    SortField.CATEGORY: attrgetter("category"),
}
