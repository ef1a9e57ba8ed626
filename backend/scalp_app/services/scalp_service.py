"""Scalp suggestion use case: bars -> indicators -> signal."""

from dataclasses import dataclass

from scalp_app.services.bar_service import BarService
from scalp_core.models import BarSeries, SignalResult
from scalp_core.signal_classifier import SignalClassifier
from scalp_core.timeframes import Timeframe


@dataclass(slots=True)
class ScalpResult:
    series: BarSeries
    result: SignalResult


class ScalpService:
    """Classifies the latest bar of a symbol's series."""

    def __init__(self, bar_service: BarService, classifier: SignalClassifier | None = None):
        self.bar_service = bar_service
        self.classifier = classifier or SignalClassifier()

    async def evaluate(self, symbol: str, timeframe: Timeframe) -> ScalpResult:
        series = await self.bar_service.build_bars(symbol, timeframe)
        return ScalpResult(series=series, result=self.classifier.classify(series.bars))
