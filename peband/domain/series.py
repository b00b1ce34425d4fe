"""Assemble a HistorySeries from raw price and P/E records."""

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from .models import DailyRecord, HistorySeries

logger = logging.getLogger(__name__)


def _to_frame(records: Iterable[Mapping[str, Any]], value_col: str) -> pd.DataFrame:
    """
    Normalize raw records to a two-column frame (date, value_col).

    Rows with unparseable dates are dropped; unparseable values become NaN.
    """
    df = pd.DataFrame(list(records))
    if df.empty or "date" not in df.columns or value_col not in df.columns:
        return pd.DataFrame({"date": pd.Series(dtype=object), value_col: pd.Series(dtype=float)})

    df = df[["date", value_col]].copy()
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.dropna(subset=["date"]).copy()
    df["date"] = df["date"].dt.date
    df[value_col] = pd.to_numeric(df[value_col], errors="coerce")
    return df


def _drop_duplicate_dates(df: pd.DataFrame, what: str) -> pd.DataFrame:
    duplicated = df.duplicated("date", keep="last")
    if duplicated.any():
        logger.warning("Dropping %d duplicate %s dates (keeping last)", int(duplicated.sum()), what)
        df = df[~duplicated]
    return df


def assemble_history(
    price_records: Iterable[Mapping[str, Any]],
    pe_records: Iterable[Mapping[str, Any]],
) -> HistorySeries:
    """
    Join P/E onto price by exact date and return a chronological HistorySeries.

    Args:
        price_records: mappings with "date" and "close"
        pe_records: mappings with "date" and "pe"; need not share the price dates

    Returns:
        HistorySeries sorted oldest first. Days without a P/E record carry pe=None.

    Raises:
        ValueError: no usable price record
    """
    prices = _to_frame(price_records, "close")
    invalid = prices["close"].isna() | (prices["close"] <= 0)
    if invalid.any():
        logger.warning("Discarding %d price records without a positive close", int(invalid.sum()))
        prices = prices[~invalid]
    if prices.empty:
        raise ValueError("No usable price records")
    prices = _drop_duplicate_dates(prices, "price")

    pes = _to_frame(pe_records, "pe").dropna(subset=["pe"])
    pes = _drop_duplicate_dates(pes, "P/E")

    joined = prices.merge(pes, on="date", how="left").sort_values("date")

    records = tuple(
        DailyRecord(
            date=row.date,
            close=float(row.close),
            pe=None if pd.isna(row.pe) else float(row.pe),
        )
        for row in joined.itertuples(index=False)
    )
    missing_pe = sum(1 for record in records if record.pe is None)
    logger.debug(
        "Assembled %d daily records (%d without P/E), %s -> %s",
        len(records), missing_pe, records[0].date, records[-1].date,
    )
    return HistorySeries(records)
