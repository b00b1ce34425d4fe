"""Shared async HTTP client for REST data sources."""

import asyncio
import logging
import random
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

MAX_CONCURRENT_REQUESTS = 10

# Transport failures worth another attempt; HTTP status errors are handled by code
RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.ConnectError)

_http_client: Optional[httpx.AsyncClient] = None
_semaphore: Optional[asyncio.Semaphore] = None


def get_http_client() -> httpx.AsyncClient:
    """Pooled client reused by every provider request."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=30)
    return _http_client


def _get_semaphore() -> asyncio.Semaphore:
    # Created inside a coroutine so it belongs to the serving loop
    global _semaphore
    if _semaphore is None:
        _semaphore = asyncio.Semaphore(MAX_CONCURRENT_REQUESTS)
    return _semaphore


async def close_http_client() -> None:
    global _http_client, _semaphore
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
    _semaphore = None


def _backoff(attempt: int, factor: float) -> float:
    return factor * (2 ** attempt) + random.uniform(0, 0.2)


def _retry_after(response: httpx.Response) -> float:
    try:
        return float(response.headers.get("Retry-After", "1"))
    except ValueError:
        return 1.0


async def http_get(
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: float = 30,
    retries: int = 3,
    backoff_factor: float = 0.5,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    GET with bounded concurrency and retries.

    429 waits for Retry-After; 5xx, timeouts and connect errors back off
    exponentially. Once attempts run out the last transport error is raised,
    or the final error response raises httpx.HTTPStatusError.
    """
    client = client or get_http_client()
    attempts = max(retries, 1)

    async with _get_semaphore():
        for attempt in range(attempts):
            final = attempt == attempts - 1
            try:
                response = await client.get(url, params=params, headers=headers, timeout=timeout)
            except RETRYABLE_ERRORS as exc:
                if final:
                    logger.error("GET %s failed after %d attempts: %s", url, attempts, exc)
                    raise
                delay = _backoff(attempt, backoff_factor)
                logger.warning("GET %s attempt %d/%d failed (%s), retrying in %.2fs",
                               url, attempt + 1, attempts, exc, delay)
                await asyncio.sleep(delay)
                continue

            if final or (response.status_code != 429 and response.status_code < 500):
                response.raise_for_status()
                return response

            if response.status_code == 429:
                delay = _retry_after(response)
            else:
                delay = _backoff(attempt, backoff_factor)
            logger.warning("GET %s returned %d, retrying in %.2fs", url, response.status_code, delay)
            await asyncio.sleep(delay)
