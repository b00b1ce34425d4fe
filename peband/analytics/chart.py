"""Price chart with moving averages and the valuation band."""

import io
import logging
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # Non-GUI backend
import matplotlib.pyplot as plt
import pandas as pd

from ..domain.models import StockSnapshot

logger = logging.getLogger(__name__)

CHART_MA_WINDOWS = (20, 60, 240)


def render_valuation_chart(snapshot: StockSnapshot, figsize: tuple = (10, 6)) -> Optional[bytes]:
    """
    Render closes, MA20/60/240 and cheap/fair/expensive levels as PNG.

    Args:
        snapshot: Search result to draw
        figsize: Figure size (width, height) in inches

    Returns:
        PNG bytes, or None if there are fewer than 2 records
    """
    view = snapshot.history.chronological
    if len(view) < 2:
        logger.debug("Not enough history to render chart for %s", snapshot.symbol)
        return None

    closes = pd.Series(
        view.closes(),
        index=pd.to_datetime([record.date for record in view]),
    )
    band = snapshot.valuation

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.plot(closes.index, closes.values, label="Close", linewidth=1.6, color="#1f77b4")
        for window in CHART_MA_WINDOWS:
            if len(closes) >= window:
                ax.plot(
                    closes.index,
                    closes.rolling(window).mean().values,
                    label=f"MA{window}",
                    linestyle="--",
                    linewidth=1.0,
                )

        ax.axhline(band.expensive_price, color="#d62728", linewidth=1.0,
                   label=f"Expensive {band.expensive_price:.2f} ({band.high_pe:.1f}x)")
        ax.axhline(band.fair_price, color="#ff7f0e", linewidth=1.0,
                   label=f"Fair {band.fair_price:.2f} ({band.fair_pe:.1f}x)")
        ax.axhline(band.cheap_price, color="#2ca02c", linewidth=1.0,
                   label=f"Cheap {band.cheap_price:.2f} ({band.low_pe:.1f}x)")

        title = f"{snapshot.display_name} ({snapshot.symbol})"
        if snapshot.is_synthetic:
            title += " [simulated]"
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.grid(alpha=0.25)
        ax.legend(loc="best", fontsize=8)
        ax.tick_params(axis="x", rotation=45)
        fig.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=100)
    finally:
        plt.close(fig)

    logger.debug("Valuation chart rendered for %s with %d points", snapshot.symbol, len(closes))
    return buf.getvalue()
