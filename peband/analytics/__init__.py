"""Analytics modules for moving averages, valuation and commentary."""

from .insight import build_insight
from .technical import (
    compute_ma,
    compute_moving_averages,
    is_above,
    is_long_term_bull,
    is_short_term_bull,
)
from .valuation import classify, cursor_position, derive_band, thresholds, valid_pe_values

__all__ = [
    "build_insight",
    "classify",
    "compute_ma",
    "compute_moving_averages",
    "cursor_position",
    "derive_band",
    "is_above",
    "is_long_term_bull",
    "is_short_term_bull",
    "thresholds",
    "valid_pe_values",
]
