"""Utility functions for symbol handling and number formatting."""

import math
import re
from datetime import date
from typing import Optional, Tuple


def normalize_symbol(symbol: str) -> str:
    """Normalize symbol to stripped uppercase."""
    return symbol.strip().upper()


def validate_symbol(symbol: str) -> bool:
    """Validate symbol format (1-12 alphanumerics, dots or dashes)."""
    return bool(re.fullmatch(r"[A-Z0-9.\-]{1,12}", symbol.upper()))


def years_before(day: date, years: int) -> date:
    """Same calendar day `years` earlier (Feb 29 maps to Feb 28)."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def history_window(end: date, years: int) -> Tuple[date, date]:
    """Return (start, end) covering the trailing `years` up to `end`."""
    return years_before(end, years), end


def format_number(value: Optional[float], decimals: int = 2, placeholder: str = "--") -> str:
    """Format number with thousand separators; None and non-finite values become the placeholder."""
    if value is None or not math.isfinite(value):
        return placeholder
    return f"{value:,.{decimals}f}"


def format_change(value: float, decimals: int = 2) -> str:
    """Format price change with arrow and sign."""
    arrow = "▲" if value >= 0 else "▼"
    return f"{arrow} {abs(value):.{decimals}f}"
