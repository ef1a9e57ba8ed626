"""Tests for the REST API layer with services replaced by stubs."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from scalp_app.api.dependencies import (
    get_analysis_service,
    get_bar_service,
    get_scalp_service,
    get_ttl_cache,
)
from scalp_app.errors import AnalysisUnavailableError, UpstreamError
from scalp_app.main import app
from scalp_app.services import AnalysisResult, ScalpResult
from scalp_app.storage import TTLCache
from scalp_core.models import (
    Bar,
    BarMode,
    BarSeries,
    Side,
    Signal,
    SignalResult,
    Suggestion,
    SymbolStat,
    Trend,
)
from scalp_core.timeframes import Timeframe


def make_series(mode: BarMode = BarMode.REAL, interval: str | None = None) -> BarSeries:
    bars = [
        Bar(time=i * 30_000, open=100.0, high=101.0, low=99.0, close=100.5, volume=3.0)
        for i in range(3)
    ]
    return BarSeries(bars=bars, mode=mode, source="test", interval=interval)


@pytest.fixture
def bar_service():
    service = MagicMock()
    service.get_trading_symbols = AsyncMock(return_value=["BTCUSDT", "SOLUSDT"])
    service.get_klines_raw = AsyncMock(return_value=[[0, "1", "2", "0.5", "1.5", "10"]])
    return service


@pytest.fixture
def scalp_service():
    service = MagicMock()
    service.evaluate = AsyncMock(
        return_value=ScalpResult(
            series=make_series(),
            result=SignalResult(trend=Trend.MIXED, signal=Signal.NEUTRAL),
        )
    )
    return service


@pytest.fixture
def analysis_service():
    service = MagicMock()
    service.analyze = AsyncMock(
        return_value=AnalysisResult(
            analysis="Qısa plan",
            symbols=["SOLUSDT", "BTCUSDT"],
            stats={
                "SOLUSDT": SymbolStat(last_close=100.5, change_pct=0.5),
                "BTCUSDT": SymbolStat(last_close=None, change_pct=None),
            },
        )
    )
    return service


@pytest.fixture
def cache():
    return TTLCache()


@pytest.fixture
def client(bar_service, scalp_service, analysis_service, cache):
    app.dependency_overrides[get_bar_service] = lambda: bar_service
    app.dependency_overrides[get_scalp_service] = lambda: scalp_service
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service
    app.dependency_overrides[get_ttl_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestMeta:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Scalp Signals"


class TestSymbols:
    def test_list(self, client):
        response = client.get("/api/symbols")
        assert response.status_code == 200
        assert response.json() == ["BTCUSDT", "SOLUSDT"]

    def test_upstream_failure(self, client, bar_service):
        bar_service.get_trading_symbols.side_effect = UpstreamError(
            "down", status=418, data={"msg": "banned"}
        )

        response = client.get("/api/symbols")

        assert response.status_code == 500
        assert response.json()["detail"] == {
            "error": "Simvolları yükləmək mümkün olmadı",
            "status": 418,
            "data": {"msg": "banned"},
        }


class TestKlines:
    def test_defaults(self, client, bar_service):
        response = client.get("/api/klines")

        assert response.status_code == 200
        assert response.json() == [[0, "1", "2", "0.5", "1.5", "10"]]
        bar_service.get_klines_raw.assert_awaited_once_with("SOLUSDT", "1m", 500)

    def test_limit_clamped(self, client, bar_service):
        client.get("/api/klines", params={"symbol": "btcusdt", "interval": "5m", "limit": 5000})
        bar_service.get_klines_raw.assert_awaited_once_with("BTCUSDT", "5m", 1000)

    def test_upstream_failure(self, client, bar_service):
        bar_service.get_klines_raw.side_effect = UpstreamError("down", status=400)

        response = client.get("/api/klines", params={"symbol": "NOPE"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "Klineləri yükləmək mümkün olmadı"
        assert response.json()["detail"]["status"] == 400


class TestScalp:
    def test_defaults_applied(self, client, scalp_service):
        response = client.get("/api/scalp30s")

        assert response.status_code == 200
        scalp_service.evaluate.assert_awaited_once_with("SOLUSDT", Timeframe.S30)
        body = response.json()
        assert body["mode"] == "gerçək 30s (aggTrades)"
        assert body["trend"] == "mixed"
        assert body["signal"] == "Nötr"
        assert body["suggestion"] is None
        assert len(body["bars"]) == 3
        assert body["bars"][0] == {
            "time": 0,
            "open": 100.0,
            "high": 101.0,
            "low": 99.0,
            "close": 100.5,
            "volume": 3.0,
        }

    def test_symbol_normalized(self, client, scalp_service):
        client.get("/api/scalp30s", params={"symbol": " ethusdt ", "tf": "5h"})
        scalp_service.evaluate.assert_awaited_once_with("ETHUSDT", Timeframe.H5)

    def test_invalid_timeframe(self, client, scalp_service):
        response = client.get("/api/scalp30s", params={"tf": "7m"})

        assert response.status_code == 422
        scalp_service.evaluate.assert_not_called()

    def test_suggestion_serialized(self, client, scalp_service):
        scalp_service.evaluate.return_value = ScalpResult(
            series=make_series(BarMode.KLINES, interval="4h"),
            result=SignalResult(
                trend=Trend.ONLY_LONG,
                signal=Signal.LONG,
                suggestion=Suggestion(
                    side=Side.LONG,
                    entry=100.0,
                    take_profit=100.5,
                    stop_loss=99.7,
                    risk_reward="1:1.5",
                ),
            ),
        )

        body = client.get("/api/scalp30s", params={"tf": "5h"}).json()

        assert body["mode"] == "4h klines"
        assert body["trend"] == "only-long"
        assert body["signal"] == "Long düşün"
        assert body["suggestion"] == {
            "side": "long",
            "entry": 100.0,
            "take_profit": 100.5,
            "stop_loss": 99.7,
            "risk_reward": "1:1.5",
        }

    def test_upstream_failure(self, client, scalp_service):
        scalp_service.evaluate.side_effect = UpstreamError("klines down", status=503)

        response = client.get("/api/scalp30s")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "30s tövsiyələrini hesablamaq mümkün olmadı"


class TestAnalysis:
    def test_analysis(self, client, analysis_service):
        response = client.get("/api/deepseek", params={"symbol": "solusdt", "tf": "1m"})

        assert response.status_code == 200
        analysis_service.analyze.assert_awaited_once_with("SOLUSDT", Timeframe.M1)
        body = response.json()
        assert body["analysis"] == "Qısa plan"
        assert body["symbols"] == ["SOLUSDT", "BTCUSDT"]
        assert body["stats"]["SOLUSDT"] == {"last_close": 100.5, "change_pct": 0.5}
        assert body["stats"]["BTCUSDT"] == {"last_close": None, "change_pct": None}

    def test_text_api_failure(self, client, analysis_service):
        analysis_service.analyze.side_effect = AnalysisUnavailableError(
            "Analysis request failed", status=401, data={"error": "bad key"}
        )

        response = client.get("/api/deepseek")

        assert response.status_code == 500
        assert response.json()["detail"] == {
            "error": "DeepSeek analizi alınmadı",
            "status": 401,
            "data": {"error": "bad key"},
        }


class TestCacheRoutes:
    def test_stats(self, client, cache):
        cache.set("bars:SOLUSDT:30s", [], ttl_ms=10_000)
        cache.get("bars:SOLUSDT:30s")

        response = client.get("/api/cache/stats")

        assert response.json() == {"entries": 1, "hits": 1, "misses": 0}

    def test_clear(self, client, cache):
        cache.set("a", 1, ttl_ms=10_000)
        cache.set("b", 2, ttl_ms=10_000)

        response = client.post("/api/cache/clear")

        assert response.json() == {"success": True, "removed": 2}
        assert len(cache) == 0

    def test_clear_key(self, client, cache):
        cache.set("klines:SOLUSDT:1m:500", [], ttl_ms=10_000)

        response = client.post("/api/cache/clear/klines:SOLUSDT:1m:500")

        assert response.status_code == 200
        assert response.json() == {"success": True, "removed": 1}
        assert cache.get("klines:SOLUSDT:1m:500") is None

    def test_clear_missing_key(self, client):
        response = client.post("/api/cache/clear/nope")
        assert response.status_code == 404
