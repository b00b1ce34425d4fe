"""Ordered chain of live data sources."""

import logging
from datetime import date
from typing import List, Sequence

from ..domain.models import FetchResult
from .base import REASON_INVALID_RESPONSE, REASON_NOT_FOUND, DataSourceAdapter, DataSourceError

logger = logging.getLogger(__name__)


class DataSourceChain(DataSourceAdapter):
    """
    Try each source in order and return the first success.

    Raises the last DataSourceError when every source fails. Unexpected
    exceptions from a source are logged and treated as a failure of that source.
    """

    name = "chain"

    def __init__(self, sources: Sequence[DataSourceAdapter]):
        if not sources:
            raise ValueError("DataSourceChain needs at least one source")
        self.sources: List[DataSourceAdapter] = list(sources)

    async def fetch(self, symbol: str, start_date: date, end_date: date) -> FetchResult:
        last_error = DataSourceError(REASON_NOT_FOUND, f"no source returned {symbol}", source=self.name)

        for index, source in enumerate(self.sources):
            try:
                result = await source.fetch(symbol, start_date, end_date)
            except DataSourceError as exc:
                logger.warning("✗ %s failed for %s: %s", source.name, symbol, exc)
                last_error = exc
            except Exception as exc:
                logger.exception("✗ %s raised unexpectedly for %s", source.name, symbol)
                last_error = DataSourceError(REASON_INVALID_RESPONSE, str(exc), source=source.name)
            else:
                if index > 0:
                    logger.info("✓ Fallback source %s served %s", source.name, symbol)
                return result

        raise last_error
