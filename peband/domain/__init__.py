"""Domain layer - models and history assembly."""

from .models import (
    AnalysisResult,
    AnalystInsight,
    ChronologicalView,
    DailyRecord,
    FetchResult,
    HistorySeries,
    MovingAverageSet,
    NewestFirstView,
    StockSnapshot,
    ValuationBand,
    ValuationStatus,
)
from .series import assemble_history

__all__ = [
    "AnalysisResult",
    "AnalystInsight",
    "ChronologicalView",
    "DailyRecord",
    "FetchResult",
    "HistorySeries",
    "MovingAverageSet",
    "NewestFirstView",
    "StockSnapshot",
    "ValuationBand",
    "ValuationStatus",
    "assemble_history",
]
