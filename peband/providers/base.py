"""Data source interface."""

from abc import ABC, abstractmethod
from datetime import date

from ..domain.models import FetchResult

# Error reasons carried by DataSourceError
REASON_NOT_FOUND = "not_found"
REASON_NETWORK = "network"
REASON_RATE_LIMIT = "rate_limit"
REASON_INVALID_RESPONSE = "invalid_response"


class DataSourceError(Exception):
    """A data source could not deliver history for a symbol."""

    def __init__(self, reason: str, message: str = "", source: str = ""):
        self.reason = reason
        self.source = source
        super().__init__(message or reason)

    def __str__(self) -> str:
        base = super().__str__()
        prefix = f"[{self.source}] " if self.source else ""
        return f"{prefix}{base} ({self.reason})"


class DataSourceAdapter(ABC):
    """Fetches daily price and P/E history plus a display name for a symbol."""

    name: str = "base"

    @abstractmethod
    async def fetch(self, symbol: str, start_date: date, end_date: date) -> FetchResult:
        """
        Fetch history between start_date and end_date (inclusive).

        Raises:
            DataSourceError: symbol unknown, no price records, network or format problems
        """
        pass
