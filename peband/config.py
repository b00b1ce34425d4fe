"""Configuration management for the P/E band valuation service."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be a positive number of seconds")
    return value


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # FinMind (primary data source, token optional for the free tier)
    finmind_api_token: Optional[str] = None
    finmind_base_url: str = "https://api.finmindtrade.com/api/v4/data"

    # Yahoo Finance (secondary data source)
    enable_yfinance: bool = True
    yahoo_suffix: str = ".TW"

    # Valuation window
    history_years: int = 3

    # Overall fetch deadline in seconds (None = wait indefinitely)
    fetch_timeout: Optional[float] = None

    # Network settings
    http_timeout: int = 30
    max_retries: int = 3
    retry_backoff_factor: float = 0.5

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        history_years = int(os.getenv("PEBAND_HISTORY_YEARS", "3"))
        if history_years < 1:
            raise ValueError("PEBAND_HISTORY_YEARS must be at least 1")

        return cls(
            finmind_api_token=os.getenv("FINMIND_API_TOKEN", "").strip() or None,
            finmind_base_url=(
                os.getenv("FINMIND_BASE_URL", "").strip()
                or "https://api.finmindtrade.com/api/v4/data"
            ),
            enable_yfinance=_env_bool("PEBAND_ENABLE_YFINANCE", True),
            yahoo_suffix=os.getenv("PEBAND_YAHOO_SUFFIX", ".TW").strip(),
            history_years=history_years,
            fetch_timeout=_env_optional_float("PEBAND_FETCH_TIMEOUT"),
            http_timeout=int(os.getenv("HTTP_TIMEOUT", "30")),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            retry_backoff_factor=float(os.getenv("RETRY_BACKOFF_FACTOR", "0.5")),
            host=os.getenv("PEBAND_HOST", "0.0.0.0").strip() or "0.0.0.0",
            port=int(os.getenv("PEBAND_PORT", "8000")),
        )


# Moving average windows in trading days (week, two weeks, month, quarter, half year, year)
MA_WINDOWS = (5, 10, 20, 60, 120, 240)

# Source labels shown next to the price
FINMIND_SOURCE_LABEL = "FinMind API"
YAHOO_SOURCE_LABEL = "Yahoo Finance"
MOCK_SOURCE_LABEL = "Mock data (live source unavailable)"

# Advisory shown when the live source failed and mock data is displayed
FALLBACK_ADVISORY = (
    "Live data unavailable, showing simulated data. "
    "Possible causes: wrong symbol, API rate limit, or no recent trading."
)
