"""Unit tests for the shared HTTP client retry behaviour."""

import asyncio
import unittest
from unittest.mock import patch

import httpx

from peband import http_client
from peband.http_client import close_http_client, http_get

URL = "https://api.example.test/data"


def _client(responses):
    """AsyncClient answering from a list of status codes or exceptions, in order."""
    calls = []

    def handler(request):
        calls.append(request)
        item = responses[min(len(calls), len(responses)) - 1]
        if isinstance(item, type) and issubclass(item, Exception):
            raise item("boom", request=request)
        return httpx.Response(item, headers={"Retry-After": "0"}, json={"ok": True})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), calls


class TestHttpGet(unittest.IsolatedAsyncioTestCase):
    """Test retries on rate limits, server and transport errors."""

    async def asyncSetUp(self):
        patcher = patch("peband.http_client._backoff", return_value=0)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_rate_limit_then_success(self):
        client, calls = _client([429, 200])
        async with client:
            response = await http_get(URL, client=client)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(calls), 2)

    async def test_server_error_exhausts_retries(self):
        client, calls = _client([503])
        async with client:
            with self.assertRaises(httpx.HTTPStatusError):
                await http_get(URL, retries=3, client=client)
        self.assertEqual(len(calls), 3)

    async def test_client_error_not_retried(self):
        client, calls = _client([404])
        async with client:
            with self.assertRaises(httpx.HTTPStatusError):
                await http_get(URL, client=client)
        self.assertEqual(len(calls), 1)

    async def test_connect_error_retried(self):
        client, calls = _client([httpx.ConnectError, 200])
        async with client:
            response = await http_get(URL, client=client)
        self.assertEqual(response.json(), {"ok": True})
        self.assertEqual(len(calls), 2)

    async def test_persistent_timeout_raised(self):
        client, calls = _client([httpx.ReadTimeout])
        async with client:
            with self.assertRaises(httpx.ReadTimeout):
                await http_get(URL, retries=2, client=client)
        self.assertEqual(len(calls), 2)

    async def test_query_params_and_headers_sent(self):
        client, calls = _client([200])
        async with client:
            await http_get(URL, params={"dataset": "TaiwanStockPrice"},
                           headers={"Authorization": "Bearer t"}, client=client)
        self.assertEqual(calls[0].url.params["dataset"], "TaiwanStockPrice")
        self.assertEqual(calls[0].headers["Authorization"], "Bearer t")


class TestConcurrencyLimit(unittest.TestCase):
    """Test the semaphore lifecycle across event loops."""

    def test_semaphore_created_on_first_request(self):
        asyncio.run(close_http_client())
        self.assertIsNone(http_client._semaphore)

        async def _fetch():
            client, _ = _client([200])
            async with client:
                return await http_get(URL, client=client)

        self.assertEqual(asyncio.run(_fetch()).status_code, 200)
        self.assertIsInstance(http_client._semaphore, asyncio.Semaphore)

        # a fresh loop after shutdown gets its own semaphore
        asyncio.run(close_http_client())
        self.assertIsNone(http_client._semaphore)
        self.assertEqual(asyncio.run(_fetch()).status_code, 200)

    def test_concurrent_requests_share_limit(self):
        async def _fetch_many():
            client, calls = _client([200])
            async with client:
                await asyncio.gather(*(http_get(URL, client=client) for _ in range(25)))
            return calls

        with patch.object(http_client, "MAX_CONCURRENT_REQUESTS", 2):
            asyncio.run(close_http_client())
            calls = asyncio.run(_fetch_many())
        self.assertEqual(len(calls), 25)
        asyncio.run(close_http_client())


if __name__ == "__main__":
    unittest.main()
