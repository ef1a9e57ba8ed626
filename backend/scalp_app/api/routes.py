"""REST API routes."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, field_validator

from scalp_app.api.dependencies import (
    get_analysis_service,
    get_bar_service,
    get_scalp_service,
    get_ttl_cache,
)
from scalp_app.config import get_settings
from scalp_app.errors import UpstreamError
from scalp_app.services import AnalysisService, BarService, ScalpService
from scalp_app.storage import TTLCache
from scalp_core.timeframes import Timeframe

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_KLINES_LIMIT = 1000


# Request models
class BarRequest(BaseModel):
    """Symbol/timeframe selection with defaults already applied."""

    symbol: str
    timeframe: Timeframe

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()


class KlinesRequest(BaseModel):
    """Pass-through kline query."""

    symbol: str
    interval: str = "1m"
    limit: int = 500

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return max(1, min(v, MAX_KLINES_LIMIT))


def bar_request(
    symbol: Optional[str] = Query(None, description="Trading pair, e.g. SOLUSDT"),
    tf: Optional[Timeframe] = Query(None, description="Timeframe code"),
) -> BarRequest:
    settings = get_settings()
    return BarRequest(
        symbol=symbol or settings.default_symbol,
        timeframe=tf or Timeframe(settings.default_timeframe),
    )


def klines_request(
    symbol: Optional[str] = Query(None, description="Trading pair"),
    interval: str = Query("1m", description="Binance kline interval"),
    limit: int = Query(500, description="Number of klines (max 1000)"),
) -> KlinesRequest:
    return KlinesRequest(
        symbol=symbol or get_settings().default_symbol,
        interval=interval,
        limit=limit,
    )


# Response models
class BarResponse(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float


class SuggestionResponse(BaseModel):
    side: str
    entry: float
    take_profit: float
    stop_loss: float
    risk_reward: str


class ScalpResponse(BaseModel):
    """Scalp suggestion response model."""

    mode: str
    trend: str
    signal: str
    suggestion: Optional[SuggestionResponse] = None
    bars: list[BarResponse]


class SymbolStatResponse(BaseModel):
    last_close: Optional[float] = None
    change_pct: Optional[float] = None


class AnalysisResponse(BaseModel):
    """Narrative analysis response model."""

    analysis: str
    symbols: list[str]
    stats: dict[str, SymbolStatResponse]


class CacheStatsResponse(BaseModel):
    entries: int
    hits: int
    misses: int


class CacheClearResponse(BaseModel):
    success: bool
    removed: int


@contextmanager
def upstream_errors(message: str) -> Iterator[None]:
    """Convert upstream failures into a 500 with a localized message."""
    try:
        yield
    except UpstreamError as e:
        logger.error(f"{message}: {e.message} (status={e.status})")
        raise HTTPException(
            status_code=500,
            detail={"error": message, "status": e.status, "data": e.data},
        ) from e


@router.get("/symbols", response_model=list[str])
async def get_symbols(bar_service: BarService = Depends(get_bar_service)):
    """Get tradable USDT symbols."""
    with upstream_errors("Simvolları yükləmək mümkün olmadı"):
        return await bar_service.get_trading_symbols()


@router.get("/klines")
async def get_klines(
    req: KlinesRequest = Depends(klines_request),
    bar_service: BarService = Depends(get_bar_service),
) -> list[list[Any]]:
    """Get raw kline tuples, cached briefly."""
    with upstream_errors("Klineləri yükləmək mümkün olmadı"):
        return await bar_service.get_klines_raw(req.symbol, req.interval, req.limit)


@router.get("/scalp30s", response_model=ScalpResponse)
async def get_scalp(
    req: BarRequest = Depends(bar_request),
    scalp_service: ScalpService = Depends(get_scalp_service),
):
    """Get the current scalp signal with the bars it was computed from."""
    with upstream_errors("30s tövsiyələrini hesablamaq mümkün olmadı"):
        scalp = await scalp_service.evaluate(req.symbol, req.timeframe)

    result = scalp.result
    return ScalpResponse(
        mode=scalp.series.label,
        trend=result.trend.value,
        signal=result.signal.value,
        suggestion=(
            SuggestionResponse(**result.suggestion.to_dict())
            if result.suggestion
            else None
        ),
        bars=[BarResponse(**b.to_dict()) for b in scalp.series.bars],
    )


@router.get("/deepseek", response_model=AnalysisResponse)
async def get_analysis(
    req: BarRequest = Depends(bar_request),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """Get a narrative scalp analysis with cross-market statistics."""
    with upstream_errors("DeepSeek analizi alınmadı"):
        result = await analysis_service.analyze(req.symbol, req.timeframe)

    return AnalysisResponse(
        analysis=result.analysis,
        symbols=result.symbols,
        stats={
            sym: SymbolStatResponse(**stat.to_dict())
            for sym, stat in result.stats.items()
        },
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def get_cache_stats(cache: TTLCache = Depends(get_ttl_cache)):
    """Get cache statistics."""
    return CacheStatsResponse(**cache.stats())


@router.post("/cache/clear", response_model=CacheClearResponse)
async def clear_cache(cache: TTLCache = Depends(get_ttl_cache)):
    """Drop every cached entry."""
    return CacheClearResponse(success=True, removed=cache.clear())


@router.post("/cache/clear/{key}", response_model=CacheClearResponse)
async def clear_cache_key(key: str, cache: TTLCache = Depends(get_ttl_cache)):
    """Drop one cached entry."""
    removed = cache.delete(key)
    if not removed:
        raise HTTPException(status_code=404, detail="Cache key not found")
    return CacheClearResponse(success=True, removed=1)
