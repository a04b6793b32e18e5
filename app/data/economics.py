"""
Cost / profit inference for rows that carry only part of the economics.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.config import PACKAGE_PROFIT_RULES, DEFAULT_MARGIN_RATE
from app.analytics.common import round_money


@dataclass(frozen=True)
class Economics:
    cost: float
    profit: float


def heuristic_profit(package: str, sale: float) -> float:
    """Profit implied by the package name when the export has no economics."""
    pkg = package.lower()
    for keyword, flat_profit in PACKAGE_PROFIT_RULES:
        if keyword in pkg:
            return flat_profit
    return sale * DEFAULT_MARGIN_RATE


def reconcile(sale: float, cost: float, profit: float) -> Economics:
    """Fill whichever of cost/profit is missing from the other.

    Rows with both values are kept as supplied, even when
    cost + profit != sale.
    """
    if profit > 0 and cost == 0:
        cost = sale - profit
    if cost > 0 and profit == 0:
        profit = sale - cost
    return Economics(cost, profit)


def resolve_economics(
    package: str,
    sale: float,
    cost: float,
    profit: float,
    *,
    has_economics: bool,
) -> Economics:
    """Cost and profit for one row, rounded to 2 dp.

    `has_economics` is a schema-level flag: whether the file has a cost or
    profit column at all, not whether this row's cells are blank.
    """
    if has_economics:
        result = reconcile(sale, cost, profit)
    else:
        p = heuristic_profit(package, sale)
        result = Economics(sale - p, p)
    return Economics(round_money(result.cost), round_money(result.profit))
