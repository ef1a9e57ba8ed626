"""Binance REST API client for market data."""

import logging
from typing import Any

import httpx

from scalp_app.errors import UpstreamError
from scalp_core.models import Bar, Trade, aggtrades_to_trades, kline_rows_to_bars

logger = logging.getLogger(__name__)

MAX_KLINES_LIMIT = 1000
MAX_AGGTRADES_LIMIT = 1000


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class BinanceRestClient:
    """Binance spot REST API client (public endpoints)."""

    BASE_URL = "https://api.binance.com"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make an API request, mapping transport, HTTP and decode errors to UpstreamError."""
        client = await self._get_client()
        try:
            response = await client.request(method, endpoint, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Binance {endpoint} returned {e.response.status_code}"
            )
            raise UpstreamError(
                f"Binance request failed: {endpoint}",
                status=e.response.status_code,
                data=_error_payload(e.response),
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Binance {endpoint} request error: {e!r}")
            raise UpstreamError(f"Binance request failed: {endpoint}") from e
        except ValueError as e:
            # 200 with a non-JSON body, e.g. a proxy maintenance page
            logger.warning(f"Binance {endpoint} returned a non-JSON body")
            raise UpstreamError(
                f"Binance returned an unreadable response: {endpoint}",
                status=response.status_code,
                data=response.text,
            ) from e

    # ------------------------------------------------------------------
    # Raw endpoints
    # ------------------------------------------------------------------

    async def get_exchange_info(self) -> dict[str, Any]:
        """Get exchange information for all symbols."""
        return await self._request("GET", "/api/v3/exchangeInfo")

    async def get_klines_raw(
        self, symbol: str, interval: str, limit: int = 500
    ) -> list[list[Any]]:
        """
        Fetch K-line tuples exactly as Binance returns them.

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: K-line interval (e.g., "1m", "1h")
            limit: Maximum number of K-lines (max 1000)

        Returns:
            List of ``[openTime, open, high, low, close, volume, ...]``
        """
        params = {
            "symbol": symbol,
            "interval": interval,
            "limit": min(limit, MAX_KLINES_LIMIT),
        }
        return await self._request("GET", "/api/v3/klines", params)

    async def get_aggtrades_raw(self, symbol: str, limit: int = 600) -> list[dict[str, Any]]:
        """Fetch the most recent aggregated trades."""
        params = {"symbol": symbol, "limit": min(limit, MAX_AGGTRADES_LIMIT)}
        return await self._request("GET", "/api/v3/aggTrades", params)

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    async def get_klines(self, symbol: str, interval: str, limit: int = 500) -> list[Bar]:
        """Fetch K-lines converted to Bars."""
        rows = await self.get_klines_raw(symbol, interval, limit)
        try:
            return kline_rows_to_bars(rows)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed klines payload for {symbol} {interval}: {e!r}")
            raise UpstreamError(
                f"Malformed klines payload for {symbol}", data=rows
            ) from e

    async def get_agg_trades(self, symbol: str, limit: int = 600) -> list[Trade]:
        """Fetch aggregated trades converted to Trades."""
        items = await self.get_aggtrades_raw(symbol, limit)
        try:
            return aggtrades_to_trades(items)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed aggTrades payload for {symbol}: {e!r}")
            raise UpstreamError(
                f"Malformed aggTrades payload for {symbol}", data=items
            ) from e

    async def get_trading_symbols(
        self,
        quote_asset: str = "USDT",
        exclude_leveraged: bool = True,
        status: str = "TRADING",
    ) -> list[str]:
        """
        Get the sorted list of tradable symbols for a quote asset.

        Args:
            quote_asset: Quote asset to filter on
            exclude_leveraged: Drop leveraged tokens (``*UPUSDT``, ``*DOWNUSDT``)
            status: Required symbol status

        Returns:
            Sorted symbol names
        """
        info = await self.get_exchange_info()
        symbols = [
            s["symbol"]
            for s in info.get("symbols", [])
            if s.get("status") == status and s.get("quoteAsset") == quote_asset
        ]
        if exclude_leveraged:
            symbols = [
                s for s in symbols if "UPUSDT" not in s and "DOWNUSDT" not in s
            ]
        return sorted(symbols)
