"""Business services."""

from scalp_app.services.bar_service import BarService, AGGTRADES_LIMIT
from scalp_app.services.scalp_service import ScalpService, ScalpResult
from scalp_app.services.market_context import (
    MarketContext,
    MultiSymbolContextBuilder,
    dedupe_symbols,
)
from scalp_app.services.analysis_service import (
    AnalysisResult,
    AnalysisService,
    SYSTEM_PROMPT,
    build_prompt,
)

__all__ = [
    "BarService",
    "AGGTRADES_LIMIT",
    "ScalpService",
    "ScalpResult",
    "MarketContext",
    "MultiSymbolContextBuilder",
    "dedupe_symbols",
    "AnalysisResult",
    "AnalysisService",
    "SYSTEM_PROMPT",
    "build_prompt",
]
