"""Bar building service.

Turns a (symbol, timeframe) request into a BarSeries:
- 30s: aggregate recent aggTrades into real 30s bars; when there are too
  few (or the trade fetch fails) fall back to synthetic bars split from
  1m klines
- other timeframes: fetch klines at the mapped Binance interval

Results and raw kline responses are kept in the shared TTL cache so that
repeated requests do not hit the rate-limited exchange.
"""

import logging
from typing import Any

from scalp_app.clients import BinanceRestClient
from scalp_app.errors import UpstreamError
from scalp_app.storage import TTLCache, bars_key, klines_key, symbols_key
from scalp_core.kline_synthesizer import KlineFallbackSynthesizer, SOURCE_CANDLES
from scalp_core.models import Bar, BarMode, BarSeries
from scalp_core.timeframes import (
    KLINE_FETCH_LIMIT,
    KLINE_KEEP_BARS,
    Timeframe,
    interval_for,
)
from scalp_core.trade_aggregator import TradeBucketAggregator

logger = logging.getLogger(__name__)

# Trades fetched per real 30s build attempt
AGGTRADES_LIMIT = 800


class BarService:
    """Builds bar series for a symbol, through the cache."""

    def __init__(
        self,
        client: BinanceRestClient,
        cache: TTLCache,
        aggregator: TradeBucketAggregator | None = None,
        synthesizer: KlineFallbackSynthesizer | None = None,
        bars_ttl_ms: int = 10_000,
        klines_ttl_ms: int = 10_000,
        symbols_ttl_ms: int = 5 * 60 * 1000,
    ):
        self.client = client
        self.cache = cache
        self.aggregator = aggregator or TradeBucketAggregator()
        self.synthesizer = synthesizer or KlineFallbackSynthesizer()
        self.bars_ttl_ms = bars_ttl_ms
        self.klines_ttl_ms = klines_ttl_ms
        self.symbols_ttl_ms = symbols_ttl_ms

    # ------------------------------------------------------------------
    # Pass-through data
    # ------------------------------------------------------------------

    async def get_klines_raw(self, symbol: str, interval: str, limit: int) -> list[list[Any]]:
        """Raw kline tuples, cached per (symbol, interval, limit)."""
        return await self.cache.get_or_fetch(
            klines_key(symbol, interval, limit),
            self.klines_ttl_ms,
            lambda: self.client.get_klines_raw(symbol, interval, limit),
        )

    async def get_trading_symbols(self, quote_asset: str = "USDT") -> list[str]:
        """Tradable symbols for a quote asset, cached."""
        return await self.cache.get_or_fetch(
            symbols_key(quote_asset),
            self.symbols_ttl_ms,
            lambda: self.client.get_trading_symbols(quote_asset=quote_asset),
        )

    # ------------------------------------------------------------------
    # Bar building
    # ------------------------------------------------------------------

    async def build_real_30s(self, symbol: str) -> list[Bar] | None:
        """Aggregate recent trades into 30s bars.

        Returns:
            Bars, or None when the trade fetch failed or produced too few bars
        """
        try:
            trades = await self.client.get_agg_trades(symbol, AGGTRADES_LIMIT)
        except UpstreamError as e:
            logger.warning(f"aggTrades fetch failed for {symbol}, using fallback: {e}")
            return None

        return self.aggregator.build(trades)

    async def build_synthetic_30s(self, symbol: str) -> list[Bar]:
        """Split recent 1m klines into synthetic 30s bars.

        Raises:
            UpstreamError: if the kline fetch fails
        """
        candles = await self.client.get_klines(symbol, "1m", SOURCE_CANDLES)
        return self.synthesizer.synthesize(candles)

    async def _build(self, symbol: str, timeframe: Timeframe) -> BarSeries:
        if timeframe is Timeframe.S30:
            bars = await self.build_real_30s(symbol)
            if bars is not None:
                return BarSeries(bars=bars, mode=BarMode.REAL, source="aggTrades")

            logger.info(f"Not enough real 30s data for {symbol}, using synthetic bars")
            bars = await self.build_synthetic_30s(symbol)
            return BarSeries(bars=bars, mode=BarMode.SYNTHETIC, source="1m_klines")

        interval = interval_for(timeframe)
        bars = await self.client.get_klines(symbol, interval, KLINE_FETCH_LIMIT)
        return BarSeries(
            bars=bars[-KLINE_KEEP_BARS:],
            mode=BarMode.KLINES,
            source="klines",
            interval=interval,
        )

    async def build_bars(self, symbol: str, timeframe: Timeframe) -> BarSeries:
        """
        Build the bar series for a symbol and timeframe.

        Args:
            symbol: Trading pair, already normalized (e.g. "SOLUSDT")
            timeframe: Requested timeframe

        Returns:
            BarSeries tagged with how the bars were produced

        Raises:
            UpstreamError: if no bars could be fetched at all
        """
        return await self.cache.get_or_fetch(
            bars_key(symbol, timeframe.value),
            self.bars_ttl_ms,
            lambda: self._build(symbol, timeframe),
        )
