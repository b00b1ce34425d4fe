"""
P/E percentile band valuation.

The band is the 10th/90th nearest-rank percentile of the symbol's own
historical P/E. EPS is backed out from the current price and a reference P/E,
and the band bounds are turned into cheap / fair / expensive prices.
"""

import logging
import math
from typing import Optional, Tuple

from ..domain.models import HistorySeries, ValuationBand, ValuationStatus

logger = logging.getLogger(__name__)

# Plausible P/E range, exclusive on both ends
PE_FLOOR = 0.0
PE_CEILING = 200.0

# More than this many valid observations are needed for a percentile band
MIN_PE_OBSERVATIONS = 10

LOW_PERCENTILE = 0.1
HIGH_PERCENTILE = 0.9

# Fixed band for short histories
DEFAULT_LOW_PE = 10.0
DEFAULT_HIGH_PE = 20.0
DEFAULT_REFERENCE_PE = 15.0

# Status thresholds blend each tier towards its neighbour
ADJACENT_WEIGHT = 0.6

# Cursor scale padding around the band
CURSOR_LOW_FACTOR = 0.8
CURSOR_HIGH_FACTOR = 1.2
CURSOR_NEUTRAL = 50.0


def _usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def valid_pe_values(series: HistorySeries) -> list:
    """Present P/E observations inside (0, 200), sorted ascending."""
    return sorted(pe for pe in series.pe_observations() if PE_FLOOR < pe < PE_CEILING)


def derive_band(series: HistorySeries, latest_pe: Optional[float]) -> ValuationBand:
    """
    Derive the valuation band for the newest close in the series.

    Args:
        series: Daily history (any length >= 1)
        latest_pe: Latest trailing P/E reported by the source, used only as the EPS divisor

    Returns:
        Complete ValuationBand. With 10 or fewer valid P/E observations the
        fixed 10x-20x band is used and is_default is set.
    """
    current_price = series.latest.close
    pes = valid_pe_values(series)
    count = len(pes)

    if count > MIN_PE_OBSERVATIONS:
        low_pe = pes[math.floor(count * LOW_PERCENTILE)]
        high_pe = pes[math.floor(count * HIGH_PERCENTILE)]
        # Zero, negative or NaN P/E (loss-making quarter) cannot back out EPS
        reference_pe = latest_pe if _usable(latest_pe) else pes[0]
        eps = current_price / reference_pe
        is_default = False
    else:
        logger.info(
            "Only %d valid P/E observations (need > %d), using default %gx-%gx band",
            count, MIN_PE_OBSERVATIONS, DEFAULT_LOW_PE, DEFAULT_HIGH_PE,
        )
        low_pe = DEFAULT_LOW_PE
        high_pe = DEFAULT_HIGH_PE
        eps = current_price / DEFAULT_REFERENCE_PE
        is_default = True

    cheap_price = eps * low_pe
    expensive_price = eps * high_pe
    fair_price = (cheap_price + expensive_price) / 2

    return ValuationBand(
        low_pe=low_pe,
        high_pe=high_pe,
        eps=eps,
        cheap_price=cheap_price,
        fair_price=fair_price,
        expensive_price=expensive_price,
        is_default=is_default,
    )


def _has_price_band(band: Optional[ValuationBand]) -> bool:
    return (
        band is not None
        and _usable(band.cheap_price)
        and _usable(band.expensive_price)
        and math.isfinite(band.fair_price)
    )


def thresholds(band: ValuationBand) -> Tuple[float, float]:
    """Return (lower, upper) status thresholds for a band."""
    lower = band.cheap_price * (1 - ADJACENT_WEIGHT) + band.fair_price * ADJACENT_WEIGHT
    upper = band.fair_price * (1 - ADJACENT_WEIGHT) + band.expensive_price * ADJACENT_WEIGHT
    return lower, upper


def classify(current_price: float, band: Optional[ValuationBand]) -> ValuationStatus:
    """
    Map the current price to cheap / fair / expensive.

    Price at or below the lower threshold is cheap, at or above the upper
    threshold is expensive, anything between is fair.
    """
    if not _has_price_band(band):
        return ValuationStatus.NO_DATA

    lower, upper = thresholds(band)
    if current_price <= lower:
        return ValuationStatus.CHEAP
    if current_price >= upper:
        return ValuationStatus.EXPENSIVE
    return ValuationStatus.FAIR


def cursor_position(current_price: float, band: Optional[ValuationBand]) -> float:
    """
    Position of the price on a 0-100 scale from cheap*0.8 to expensive*1.2.

    Returns 50.0 when the band cannot be drawn.
    """
    if not _has_price_band(band):
        return CURSOR_NEUTRAL

    low = band.cheap_price * CURSOR_LOW_FACTOR
    span = band.expensive_price * CURSOR_HIGH_FACTOR - low
    if not math.isfinite(span) or span <= 0:
        return CURSOR_NEUTRAL

    pos = (current_price - low) / span * 100
    if math.isnan(pos):
        return CURSOR_NEUTRAL
    return min(max(pos, 0.0), 100.0)
