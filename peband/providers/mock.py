"""Deterministic synthetic history used when every live source fails."""

import logging
import math
from datetime import date, timedelta
from typing import Optional

import numpy as np

from ..config import MOCK_SOURCE_LABEL
from ..domain.models import FetchResult

logger = logging.getLogger(__name__)

MOCK_DAYS = 365 * 3
BASE_PRICE = 500.0
SEED_PRICE_SPREAD = 200
WAVE_FREQUENCY = 0.1
WAVE_AMPLITUDE = 10.0
NOISE_AMPLITUDE = 5.0
MIN_PRICE = 10.0
BASE_PE = 20.0
PE_NOISE = 5.0

# Recognizable names for well-known symbols, everything else is generic
MOCK_NAMES = {"2330": "TSMC (mock)"}
DEFAULT_MOCK_NAME = "Mock stock"


def symbol_seed(symbol: str) -> int:
    """Sum of the character codes of the symbol."""
    return sum(ord(ch) for ch in symbol)


class MockSeriesGenerator:
    """
    Synthetic daily closes and P/E keyed by symbol.

    closes: start at 500 + seed % 200, each day add a sine wave step plus
    bounded noise, floor at 10. P/E: close / (20 + noise in [0, 5)).
    Noise comes from a generator seeded with the symbol seed, so the same
    symbol and anchor date always give the same series.
    """

    def __init__(self, days: int = MOCK_DAYS):
        if days < 1:
            raise ValueError("days must be positive")
        self.days = days

    def generate(self, symbol: str, end_date: Optional[date] = None) -> FetchResult:
        """
        Args:
            symbol: Requested symbol
            end_date: Anchor date (default today); the last record is the day before

        Returns:
            FetchResult flagged is_synthetic with the mock source label
        """
        anchor = end_date or date.today()
        seed = symbol_seed(symbol)
        rng = np.random.default_rng(seed)

        price = BASE_PRICE + (seed % SEED_PRICE_SPREAD)
        price_records = []
        pe_records = []
        for i in range(self.days):
            change = math.sin(i * WAVE_FREQUENCY) * WAVE_AMPLITUDE + (rng.random() - 0.5) * NOISE_AMPLITUDE
            price = max(price + change, MIN_PRICE)
            day = anchor - timedelta(days=self.days - i)
            close = round(price, 2)
            price_records.append({"date": day, "close": close})
            pe_records.append({"date": day, "pe": round(price / (BASE_PE + rng.random() * PE_NOISE), 2)})

        logger.info(
            "Generated %d mock records for %s (seed=%d, start=%.2f)",
            self.days, symbol, seed, price_records[0]["close"],
        )
        return FetchResult(
            price_records=price_records,
            pe_records=pe_records,
            display_name=MOCK_NAMES.get(symbol, DEFAULT_MOCK_NAME),
            source=MOCK_SOURCE_LABEL,
            is_synthetic=True,
        )
