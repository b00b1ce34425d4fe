"""Output formatters for analysis results (pure functions)."""

from typing import Dict

from ..config import MA_WINDOWS
from ..domain.models import AnalysisResult, ValuationBand
from ..utils import format_change, format_number

MA_LABELS = {
    5: "5D (week)",
    10: "10D (2 weeks)",
    20: "20D (month)",
    60: "60D (quarter)",
    120: "120D (half year)",
    240: "240D (year)",
}

RISK_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}


def format_band_lines(band: ValuationBand) -> Dict[str, str]:
    """Display strings for the three price levels with their P/E multiples."""
    return {
        "expensive": f"Expensive (P/E {band.high_pe:.1f}x): {format_number(band.expensive_price)}",
        "fair": f"Fair (P/E {band.fair_pe:.1f}x): {format_number(band.fair_price)}",
        "cheap": f"Cheap (P/E {band.low_pe:.1f}x): {format_number(band.cheap_price)}",
    }


def format_analysis_text(result: AnalysisResult) -> str:
    """
    Format an AnalysisResult as a plain-text report.

    Args:
        result: Output of SnapshotService.search

    Returns:
        Multi-line text
    """
    snap = result.snapshot
    band = snap.valuation
    lines = []

    if result.advisory:
        lines.append(f"⚠️ {result.advisory}")
        lines.append("")

    lines.append(f"{snap.display_name} ({snap.symbol})")
    lines.append(f"Price: {format_number(snap.current_price)} {format_change(snap.price_change)}")
    lines.append(f"P/E: {format_number(snap.current_pe, 1)}x")
    source_note = " (close)" if snap.is_real else ""
    lines.append(f"Source: {snap.source}{source_note}")
    lines.append("")

    lines.append(f"Valuation: {result.status.label}")
    band_lines = format_band_lines(band)
    lines.append(f"- {band_lines['expensive']}")
    lines.append(f"- {band_lines['fair']}")
    lines.append(f"- {band_lines['cheap']}")
    if band.is_default:
        lines.append("  Not enough P/E history, default 10x-20x band used.")
    lines.append(f"Position in band: {result.cursor_position:.0f}/100")
    lines.append("")

    lines.append("Moving averages:")
    for window in MA_WINDOWS:
        value = result.moving_averages.get(window)
        if value is None:
            marker = ""
        else:
            marker = " ↑" if snap.current_price > value else " ↓"
        lines.append(f"- {MA_LABELS[window]}: {format_number(value, 1)}{marker}")
    lines.append("")

    insight = result.insight
    lines.append(f"Risk: {RISK_LABELS.get(insight.risk_level, insight.risk_level)}")
    lines.append(insight.commentary)

    if snap.is_synthetic:
        lines.append("")
        lines.append("Simulated data, for display only.")

    return "\n".join(lines)
