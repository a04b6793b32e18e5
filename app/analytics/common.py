"""
Safe math and money helpers used across all analytics modules.
"""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP

import numpy as np
import pandas as pd

from app.config import CURRENCY_SYMBOL

_CENTS = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half away from zero to 2 decimal places."""
    if value is None or (isinstance(value, float) and (math.isnan(value) or math.isinf(value))):
        return 0.0
    return float(Decimal(float(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def calc_margin(revenue: float, profit: float) -> float:
    """Profit as a percentage of revenue."""
    return safe_divide(profit, revenue) * 100


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def format_currency(value: float) -> str:
    """Metical display format: 1234.5 -> "1.234,50 MT"."""
    text = f"{round_money(value):,.2f}"
    text = text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"{text} {CURRENCY_SYMBOL}"


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
