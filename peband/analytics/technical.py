"""Moving averages and trend reads."""

import logging
from typing import Optional

import numpy as np

from ..config import MA_WINDOWS
from ..domain.models import HistorySeries, MovingAverageSet, NewestFirstView

logger = logging.getLogger(__name__)


def compute_ma(view: NewestFirstView, window_days: int) -> Optional[float]:
    """
    Simple moving average over the most recent closes.

    Args:
        view: Series ordered newest first
        window_days: Number of trading days

    Returns:
        Mean of the first window_days closes, or None if the view is shorter than the window
    """
    if not isinstance(view, NewestFirstView):
        raise TypeError("compute_ma expects a NewestFirstView (use series.newest_first)")
    if window_days <= 0:
        raise ValueError("window_days must be positive")

    if len(view) < window_days:
        return None
    return float(np.mean(view.closes()[:window_days]))


def compute_moving_averages(series: HistorySeries) -> MovingAverageSet:
    """Compute every configured MA window against one snapshot of the series."""
    view = series.newest_first
    values = {f"ma{window}": compute_ma(view, window) for window in MA_WINDOWS}
    logger.debug(
        "Moving averages over %d records: %s",
        len(view),
        {k: (round(v, 2) if v is not None else None) for k, v in values.items()},
    )
    return MovingAverageSet(**values)


def is_above(price: float, ma: Optional[float]) -> Optional[bool]:
    """True if price is above the average; None when the average is undefined."""
    if ma is None:
        return None
    return price > ma


def is_long_term_bull(price: float, mas: MovingAverageSet) -> Optional[bool]:
    """Price above the yearly (240-day) average."""
    return is_above(price, mas.ma240)


def is_short_term_bull(price: float, mas: MovingAverageSet) -> Optional[bool]:
    """Price above the monthly (20-day) average."""
    return is_above(price, mas.ma20)
