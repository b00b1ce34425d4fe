"""Analyst commentary combining valuation status with MA trend."""

import logging

from ..domain.models import AnalystInsight, MovingAverageSet, StockSnapshot, ValuationStatus
from .technical import is_long_term_bull, is_short_term_bull

logger = logging.getLogger(__name__)

RISK_BY_STATUS = {
    ValuationStatus.CHEAP: "low",
    ValuationStatus.FAIR: "medium",
    ValuationStatus.EXPENSIVE: "high",
    ValuationStatus.NO_DATA: "medium",
}


def _valuation_sentence(name: str, status: ValuationStatus) -> str:
    if status == ValuationStatus.CHEAP:
        return (
            f"Valuation suggests {name} has a clear margin of safety: P/E sits in the low "
            "part of its historical range, a reasonable window for long-term value buyers."
        )
    if status == ValuationStatus.FAIR:
        return (
            "The price reflects fair value and market expectations are partly priced in. "
            "Consider range trading, or wait for a pullback to a more attractive level before adding."
        )
    if status == ValuationStatus.EXPENSIVE:
        return (
            "The price is in the historically expensive zone, reflecting overheated sentiment or "
            "fully priced growth. Risk/reward for chasing is poor; consider taking profit or tight stops."
        )
    return "Not enough P/E history to judge valuation (loss-making company or ETF)."


def _trend_sentence(long_bull, short_bull, mas: MovingAverageSet) -> str:
    if long_bull is None:
        return "Less than a year of trading history, so the long-term trend cannot be read yet."
    if long_bull:
        if short_bull:
            return (
                "The price holds above both the yearly (240MA) and monthly (20MA) averages: "
                "long and short trends are both up. Ride the trend, but watch for a pullback after stretched gains."
            )
        return (
            "The yearly trend (240MA) still points up, but the price has slipped below the monthly "
            "average. Holding the quarterly line (60MA) would make this a healthy pullback within an uptrend."
        )
    if short_bull:
        return (
            f"The price has recovered the monthly average, but the yearly average ({mas.ma240:.1f}) "
            "still caps it: a bear-market bounce. Keep short trades nimble."
        )
    return (
        "The price is capped by both the monthly and yearly averages: long and short trends are down. "
        "Until a breakout on volume, stay cautious and keep cash for a bottoming signal."
    )


def build_insight(
    snapshot: StockSnapshot,
    mas: MovingAverageSet,
    status: ValuationStatus,
) -> AnalystInsight:
    """Build risk level, trend flags and commentary for one snapshot."""
    price = snapshot.current_price
    long_bull = is_long_term_bull(price, mas)
    short_bull = is_short_term_bull(price, mas)

    trend = _trend_sentence(long_bull, short_bull, mas)
    commentary = (
        f"{_valuation_sentence(snapshot.display_name, status)} "
        f"Technically, {trend[0].lower()}{trend[1:]}"
    )
    return AnalystInsight(
        risk_level=RISK_BY_STATUS[status],
        long_term_bull=long_bull,
        short_term_bull=short_bull,
        commentary=commentary,
    )
