"""
Dashboard analytics — totals, top-N breakdowns, revenue time series, top clients.

Every function here is pure: the caller's record set is never reordered or
mutated, so results can be recomputed on every filter change.
"""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from app.config import TOP_N_LIMIT, TOP_CLIENTS_LIMIT
from app.data.loader import to_frame
from app.data.schemas import (
    ClientRank, DashboardStats, FilterCriteria, GroupField, NamedCount, TimePoint, Transaction,
)
from app.analytics.common import format_currency, round_money, safe_divide, sanitize_for_json


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _rank(df: pd.DataFrame, by: str, limit: int) -> pd.DataFrame:
    """Sort descending on `by`, ties in first-seen order, keep `limit` rows.

    `df` must already be in first-seen order (groupby with sort=False).
    """
    df = df.copy()
    df["_first_seen"] = range(len(df))
    df = df.sort_values([by, "_first_seen"], ascending=[False, True])
    return df.head(limit).drop(columns="_first_seen")


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------

def top_n(
    records: Sequence[Transaction],
    field: GroupField,
    limit: int = TOP_N_LIMIT,
) -> list[NamedCount]:
    """Count records per distinct value of `field`, most frequent first."""
    if not records:
        return []

    keys = pd.DataFrame({"name": [str(field.accessor(t)) for t in records]})
    counts = keys.groupby("name", sort=False).size().reset_index(name="value")

    return [
        NamedCount(name=r["name"], value=int(r["value"]))
        for _, r in _rank(counts, "value", limit).iterrows()
    ]


def revenue_over_time(records: Sequence[Transaction]) -> list[TimePoint]:
    """One point per distinct date, oldest calendar day first.

    Dates that do not parse go last, in string order.
    """
    if not records:
        return []

    df = to_frame(records)
    daily = df.groupby("date", sort=False).agg(
        revenue=("sale_value", "sum"),
        profit=("profit", "sum"),
        day=("sale_date", "first"),
    ).reset_index()
    daily = daily.sort_values(["day", "date"], na_position="last")

    return [
        TimePoint(
            date=r["date"],
            value=round_money(float(r["revenue"])),
            profit=round_money(float(r["profit"])),
        )
        for _, r in daily.iterrows()
    ]


def top_clients(
    records: Sequence[Transaction],
    limit: int = TOP_CLIENTS_LIMIT,
) -> list[ClientRank]:
    """Clients ranked by total spend, with their transaction counts."""
    if not records:
        return []

    df = to_frame(records)
    clients = df.groupby("client", sort=False).agg(
        total_spent=("sale_value", "sum"),
        transactions=("id", "count"),
    ).reset_index()

    return [
        ClientRank(
            name=r["client"],
            total_spent=round_money(float(r["total_spent"])),
            transactions=int(r["transactions"]),
        )
        for _, r in _rank(clients, "total_spent", limit).iterrows()
    ]


# ---------------------------------------------------------------------------
# Full snapshot
# ---------------------------------------------------------------------------

def calculate_stats(records: Sequence[Transaction]) -> DashboardStats:
    """Aggregate statistics over a record set."""
    if not records:
        return DashboardStats.empty()

    df = to_frame(records)
    revenue = float(df["sale_value"].sum())
    count = len(df)

    return DashboardStats(
        total_revenue=round_money(revenue),
        total_profit=round_money(float(df["profit"].sum())),
        total_cost=round_money(float(df["cost"].sum())),
        sales_count=count,
        avg_ticket=round_money(safe_divide(revenue, count)),
        top_packages=top_n(records, GroupField.PACKAGE),
        top_operators=top_n(records, GroupField.OPERATOR),
        top_categories=top_n(records, GroupField.CATEGORY),
        status_distribution=top_n(records, GroupField.STATUS),
        revenue_over_time=revenue_over_time(records),
        top_clients=top_clients(records),
    )


def dashboard_summary(records: Sequence[Transaction], criteria: FilterCriteria | None) -> dict:
    """JSON payload for the dashboard page: stats plus display strings.

    `records` is the already filtered set. An empty set yields
    {"empty": True} so the client can show its empty state.
    """
    label = criteria.label if criteria else FilterCriteria().label
    if not records:
        return {"label": label, "empty": True}

    stats = calculate_stats(records)
    dates = sorted(t.date for t in records)
    return sanitize_for_json({
        "label": label,
        "empty": False,
        "date_range": f"{dates[0]} to {dates[-1]}",
        "stats": stats.to_dict(),
        "display": {
            "total_revenue": format_currency(stats.total_revenue),
            "total_profit": format_currency(stats.total_profit),
            "total_cost": format_currency(stats.total_cost),
            "avg_ticket": format_currency(stats.avg_ticket),
        },
    })
