"""Converters from raw exchange payloads to hot path models.

Binance delivers numbers as strings:
- aggTrades: objects with ``T`` (trade time, ms), ``p`` (price), ``q`` (quantity)
- klines: tuples ``[openTime, open, high, low, close, volume, ...]``
"""

from typing import Any, Sequence

from scalp_core.models.bar import Bar, Trade


# =============================================================================
# Payload conversions
# =============================================================================

def aggtrade_to_trade(item: dict[str, Any]) -> Trade:
    """Convert a Binance aggTrade JSON object to a Trade.

    Args:
        item: aggTrade object as returned by ``/api/v3/aggTrades``

    Returns:
        Trade dataclass
    """
    return Trade(
        timestamp=int(item["T"]),
        price=float(item["p"]),
        quantity=float(item["q"]),
    )


def kline_row_to_bar(row: Sequence[Any]) -> Bar:
    """Convert a Binance kline tuple to a Bar.

    Args:
        row: ``[openTime, open, high, low, close, volume, ...]``

    Returns:
        Bar dataclass
    """
    return Bar(
        time=int(row[0]),
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
        volume=float(row[5]),
    )


def aggtrades_to_trades(items: Sequence[dict[str, Any]]) -> list[Trade]:
    return [aggtrade_to_trade(item) for item in items]


def kline_rows_to_bars(rows: Sequence[Sequence[Any]]) -> list[Bar]:
    return [kline_row_to_bar(row) for row in rows]
