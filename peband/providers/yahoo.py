"""Yahoo Finance provider via yfinance (secondary live source)."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

import pandas as pd
import yfinance as yf

from ..config import YAHOO_SOURCE_LABEL, Config
from ..domain.models import FetchResult
from .base import REASON_NETWORK, REASON_NOT_FOUND, DataSourceAdapter, DataSourceError

logger = logging.getLogger(__name__)


class YahooFinanceProvider(DataSourceAdapter):
    """
    Daily closes from yfinance plus the latest trailing P/E.

    Yahoo has no P/E history, so at most one P/E record (on the newest date)
    is returned and the valuation falls back to the default band.
    """

    name = "yfinance"

    def __init__(self, config: Config):
        self.config = config

    def _provider_symbol(self, symbol: str) -> str:
        if "." in symbol or not self.config.yahoo_suffix:
            return symbol
        return f"{symbol}{self.config.yahoo_suffix}"

    def _download(self, ticker: str, start_date: date, end_date: date) -> Tuple[pd.DataFrame, Dict[str, Any]]:
        """Blocking yfinance calls."""
        handle = yf.Ticker(ticker)
        # yfinance treats end as exclusive
        df = handle.history(start=start_date.isoformat(), end=(end_date + timedelta(days=1)).isoformat())
        try:
            info = handle.info or {}
        except Exception as exc:
            logger.warning("[yfinance] info unavailable for %s: %s", ticker, exc)
            info = {}
        return df, info

    async def fetch(self, symbol: str, start_date: date, end_date: date) -> FetchResult:
        ticker = self._provider_symbol(symbol)
        logger.info("[yfinance] Fetching %s from %s to %s", ticker, start_date, end_date)

        loop = asyncio.get_running_loop()
        try:
            df, info = await loop.run_in_executor(None, self._download, ticker, start_date, end_date)
        except Exception as exc:
            raise DataSourceError(REASON_NETWORK, f"{ticker}: {exc}", source=self.name) from exc

        if df is None or df.empty or "Close" not in df.columns:
            raise DataSourceError(REASON_NOT_FOUND, f"no price data for {ticker}", source=self.name)

        closes = df["Close"].dropna()
        if closes.empty:
            raise DataSourceError(REASON_NOT_FOUND, f"no closes for {ticker}", source=self.name)

        price_records = [
            {"date": ts.date(), "close": float(value)}
            for ts, value in closes.items()
        ]

        pe_records = []
        trailing_pe: Optional[float] = info.get("trailingPE")
        if trailing_pe is not None:
            pe_records.append({"date": price_records[-1]["date"], "pe": trailing_pe})

        display_name = info.get("longName") or info.get("shortName") or symbol
        logger.info("[yfinance] %s: %d closes, trailing P/E %s", ticker, len(price_records), trailing_pe)
        return FetchResult(
            price_records=price_records,
            pe_records=pe_records,
            display_name=str(display_name),
            source=YAHOO_SOURCE_LABEL,
        )
