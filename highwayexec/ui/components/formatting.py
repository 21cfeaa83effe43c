"""
Utility helpers for formatting numeric values, currency strings, and percentages.
"""

from __future__ import annotations

import math
from typing import Optional

MISSING = "—"


def _is_missing(value: Optional[float]) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if _is_missing(value):
        return MISSING
    return f"{float(value):,.{decimals}f}"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    if _is_missing(value):
        return MISSING
    return f"{float(value):.{decimals}f}%"


def _indian_grouping(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,56,789
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(value: Optional[float]) -> str:
    """Rupee amount rounded to whole units with lakh/crore digit grouping."""
    if _is_missing(value):
        return MISSING
    rounded = int(round(float(value)))
    sign = "-" if rounded < 0 else ""
    return f"{sign}₹{_indian_grouping(str(abs(rounded)))}"
