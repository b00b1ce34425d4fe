"""Search orchestration: live fetch, mock fallback, snapshot and analysis."""

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..analytics.insight import build_insight
from ..analytics.technical import compute_moving_averages
from ..analytics.valuation import classify, cursor_position, derive_band
from ..config import FALLBACK_ADVISORY, Config
from ..domain.models import AnalysisResult, FetchResult, StockSnapshot
from ..domain.series import assemble_history
from ..providers.base import DataSourceAdapter
from ..providers.mock import MockSeriesGenerator
from ..utils import history_window, normalize_symbol

logger = logging.getLogger(__name__)


def build_snapshot(symbol: str, result: FetchResult, fetched_at: Optional[datetime] = None) -> StockSnapshot:
    """
    Assemble history and valuation for one fetch result.

    Raises:
        ValueError: the result has no usable price record
    """
    series = assemble_history(result.price_records, result.pe_records)
    latest = series.latest
    previous = series.previous
    price_change = latest.close - previous.close if previous is not None else 0.0
    current_pe = series.latest_pe()

    return StockSnapshot(
        symbol=symbol,
        display_name=result.display_name,
        current_price=latest.close,
        price_change=price_change,
        current_pe=current_pe,
        source=result.source,
        is_synthetic=result.is_synthetic,
        history=series,
        valuation=derive_band(series, current_pe),
        fetched_at=fetched_at or datetime.now(),
    )


def analyze(snapshot: StockSnapshot, advisory: Optional[str] = None) -> AnalysisResult:
    """Compute moving averages, status, cursor and commentary from a snapshot."""
    mas = compute_moving_averages(snapshot.history)
    status = classify(snapshot.current_price, snapshot.valuation)
    return AnalysisResult(
        snapshot=snapshot,
        moving_averages=mas,
        status=status,
        cursor_position=cursor_position(snapshot.current_price, snapshot.valuation),
        insight=build_insight(snapshot, mas, status),
        advisory=advisory,
    )


class SnapshotService:
    """
    Resolve a symbol to an AnalysisResult.

    The live source is tried first; any failure (source error, timeout, empty
    or unusable data) is logged and replaced by mock data with an advisory.
    """

    def __init__(
        self,
        config: Config,
        source: DataSourceAdapter,
        mock_generator: Optional[MockSeriesGenerator] = None,
        today: Callable[[], date] = date.today,
    ):
        self.config = config
        self.source = source
        self.mock_generator = mock_generator or MockSeriesGenerator()
        self.today = today

    async def _fetch_live(self, symbol: str, start: date, end: date) -> FetchResult:
        fetch = self.source.fetch(symbol, start, end)
        if self.config.fetch_timeout is None:
            return await fetch
        return await asyncio.wait_for(fetch, timeout=self.config.fetch_timeout)

    async def search(self, symbol: str) -> AnalysisResult:
        symbol = normalize_symbol(symbol)
        if not symbol:
            raise ValueError("symbol must not be empty")

        start, end = history_window(self.today(), self.config.history_years)
        logger.info("Searching %s (%s -> %s)", symbol, start, end)

        try:
            result = await self._fetch_live(symbol, start, end)
            snapshot = build_snapshot(symbol, result)
        except Exception as exc:
            logger.warning("Live data failed for %s, switching to mock data: %s", symbol, exc)
            snapshot = build_snapshot(symbol, self.mock_generator.generate(symbol, end_date=end))
            analysis = analyze(snapshot, advisory=FALLBACK_ADVISORY)
        else:
            analysis = analyze(snapshot)

        logger.info(
            "%s (%s): price=%.2f status=%s source=%s",
            symbol, snapshot.display_name, snapshot.current_price,
            analysis.status.value, snapshot.source,
        )
        return analysis


class SearchSession:
    """
    Owns the single "current result" slot for one user.

    A new search cancels the one in flight, and a result is stored only if
    its request is still the latest, so a slow old request never replaces a
    newer one. The slot is replaced wholesale on every completed search.
    """

    def __init__(self, service: SnapshotService):
        self.service = service
        self._current: Optional[AnalysisResult] = None
        self._task: Optional[asyncio.Task] = None
        self._request_id = 0

    @property
    def current(self) -> Optional[AnalysisResult]:
        return self._current

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def search(self, symbol: str) -> Optional[AnalysisResult]:
        """
        Run a search and store its result.

        Returns:
            The AnalysisResult, or None if a newer search superseded this one
        """
        self._request_id += 1
        request_id = self._request_id

        if self.in_flight:
            logger.info("Cancelling superseded search (request %d)", request_id - 1)
            self._task.cancel()

        task = asyncio.ensure_future(self.service.search(symbol))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if request_id != self._request_id:
                logger.debug("Request %d superseded while fetching %s", request_id, symbol)
                return None
            raise
        finally:
            if self._task is task:
                self._task = None

        if request_id != self._request_id:
            logger.debug("Discarding stale result for %s (request %d)", symbol, request_id)
            return None

        self._current = result
        return result
