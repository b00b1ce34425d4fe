"""FinMind REST API provider (Taiwan listed stocks)."""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from ..config import FINMIND_SOURCE_LABEL, Config
from ..domain.models import FetchResult
from ..http_client import http_get
from .base import (
    REASON_INVALID_RESPONSE,
    REASON_NETWORK,
    REASON_NOT_FOUND,
    REASON_RATE_LIMIT,
    DataSourceAdapter,
    DataSourceError,
)

logger = logging.getLogger(__name__)

DATASET_PRICE = "TaiwanStockPrice"
DATASET_PER = "TaiwanStockPER"
DATASET_INFO = "TaiwanStockInfo"

# FinMind answers quota exhaustion with 402
RATE_LIMIT_STATUSES = (402, 429)


class FinMindProvider(DataSourceAdapter):
    """
    Daily close, daily P/E and company name from FinMind.

    The three datasets are requested concurrently. Missing prices are fatal;
    a failed P/E or info request degrades to no P/E history / symbol as name.
    """

    name = "finmind"

    def __init__(self, config: Config, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.http_client = http_client

    def _headers(self) -> Optional[Dict[str, str]]:
        if not self.config.finmind_api_token:
            return None
        return {"Authorization": f"Bearer {self.config.finmind_api_token}"}

    async def _get_dataset(
        self,
        dataset: str,
        symbol: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch one dataset and return its "data" rows."""
        params = {"dataset": dataset, "data_id": symbol}
        if start_date is not None:
            params["start_date"] = start_date.isoformat()
        if end_date is not None:
            params["end_date"] = end_date.isoformat()

        try:
            response = await http_get(
                self.config.finmind_base_url,
                params=params,
                headers=self._headers(),
                timeout=self.config.http_timeout,
                retries=self.config.max_retries,
                backoff_factor=self.config.retry_backoff_factor,
                client=self.http_client,
            )
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            reason = REASON_RATE_LIMIT if code in RATE_LIMIT_STATUSES else REASON_NETWORK
            raise DataSourceError(reason, f"{dataset} HTTP {code}", source=self.name) from exc
        except httpx.HTTPError as exc:
            raise DataSourceError(REASON_NETWORK, f"{dataset}: {exc}", source=self.name) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DataSourceError(
                REASON_INVALID_RESPONSE, f"{dataset}: response is not JSON", source=self.name
            ) from exc

        if not isinstance(payload, dict):
            raise DataSourceError(REASON_INVALID_RESPONSE, f"{dataset}: unexpected payload", source=self.name)

        status = payload.get("status")
        if status is not None and status != 200:
            reason = REASON_RATE_LIMIT if status in RATE_LIMIT_STATUSES else REASON_INVALID_RESPONSE
            raise DataSourceError(
                reason, f"{dataset}: {payload.get('msg', 'error')} (status {status})", source=self.name
            )

        data = payload.get("data") or []
        if not isinstance(data, list):
            raise DataSourceError(REASON_INVALID_RESPONSE, f"{dataset}: data is not a list", source=self.name)

        logger.debug("[FinMind] %s for %s: %d rows", dataset, symbol, len(data))
        return data

    async def _get_optional(self, dataset: str, symbol: str, **kwargs) -> List[Dict[str, Any]]:
        try:
            return await self._get_dataset(dataset, symbol, **kwargs)
        except DataSourceError as exc:
            logger.warning("[FinMind] %s unavailable for %s: %s", dataset, symbol, exc)
            return []

    async def fetch(self, symbol: str, start_date: date, end_date: date) -> FetchResult:
        logger.info("[FinMind] Fetching %s from %s to %s", symbol, start_date, end_date)

        price_rows, per_rows, info_rows = await asyncio.gather(
            self._get_dataset(DATASET_PRICE, symbol, start_date=start_date, end_date=end_date),
            self._get_optional(DATASET_PER, symbol, start_date=start_date, end_date=end_date),
            self._get_optional(DATASET_INFO, symbol),
        )

        if not price_rows:
            raise DataSourceError(REASON_NOT_FOUND, f"no price data for {symbol}", source=self.name)

        price_records = [
            {"date": row.get("date"), "close": row.get("close")}
            for row in price_rows
        ]
        pe_records = [
            {"date": row.get("date"), "pe": row.get("PER", row.get("p_e_ratio"))}
            for row in per_rows
        ]

        display_name = symbol
        if info_rows:
            display_name = str(info_rows[0].get("stock_name") or symbol).strip() or symbol

        logger.info(
            "[FinMind] %s (%s): %d prices, %d P/E rows",
            symbol, display_name, len(price_records), len(pe_records),
        )
        return FetchResult(
            price_records=price_records,
            pe_records=pe_records,
            display_name=display_name,
            source=FINMIND_SOURCE_LABEL,
        )
