"""Domain models for the valuation engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class DailyRecord:
    """One trading day: close price and trailing P/E (None when not reported)."""
    date: date
    close: float
    pe: Optional[float] = None


class _SeriesView:
    """Read-only ordered view over daily records. Order is fixed by the subclass."""

    __slots__ = ("_records",)

    def __init__(self, records: Tuple[DailyRecord, ...]):
        self._records = records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DailyRecord]:
        return iter(self._records)

    def __getitem__(self, index):
        return self._records[index]

    def closes(self) -> List[float]:
        return [record.close for record in self._records]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(len={len(self._records)})"


class ChronologicalView(_SeriesView):
    """Records oldest first."""


class NewestFirstView(_SeriesView):
    """Records newest first (index 0 is the latest trading day)."""


@dataclass(frozen=True)
class HistorySeries:
    """
    Daily history for one symbol, stored chronologically ascending.

    Invariants (checked on construction):
    - at least one record
    - dates strictly increasing (no duplicates)
    """
    records: Tuple[DailyRecord, ...]

    def __post_init__(self):
        records = tuple(self.records)
        if not records:
            raise ValueError("HistorySeries requires at least one record")
        for prev, curr in zip(records, records[1:]):
            if curr.date <= prev.date:
                raise ValueError(
                    f"HistorySeries dates must be strictly ascending: {prev.date} -> {curr.date}"
                )
        object.__setattr__(self, "records", records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def chronological(self) -> ChronologicalView:
        return ChronologicalView(self.records)

    @property
    def newest_first(self) -> NewestFirstView:
        # Reversal of the stored order, never a re-sort
        return NewestFirstView(tuple(reversed(self.records)))

    @property
    def latest(self) -> DailyRecord:
        return self.records[-1]

    @property
    def previous(self) -> Optional[DailyRecord]:
        return self.records[-2] if len(self.records) > 1 else None

    @property
    def start_date(self) -> date:
        return self.records[0].date

    @property
    def end_date(self) -> date:
        return self.records[-1].date

    def pe_observations(self) -> List[float]:
        """Present P/E values in chronological order."""
        return [record.pe for record in self.records if record.pe is not None]

    def latest_pe(self) -> Optional[float]:
        """Most recent present P/E value, or None."""
        for record in reversed(self.records):
            if record.pe is not None:
                return record.pe
        return None


@dataclass(frozen=True)
class ValuationBand:
    """P/E percentile band and the price thresholds derived from it."""
    low_pe: float
    high_pe: float
    eps: float
    cheap_price: float
    fair_price: float
    expensive_price: float
    is_default: bool = False  # True when history was too short and the fixed band was used

    @property
    def fair_pe(self) -> float:
        return (self.low_pe + self.high_pe) / 2


@dataclass(frozen=True)
class MovingAverageSet:
    """Simple moving averages; None means fewer records than the window."""
    ma5: Optional[float] = None
    ma10: Optional[float] = None
    ma20: Optional[float] = None
    ma60: Optional[float] = None
    ma120: Optional[float] = None
    ma240: Optional[float] = None

    def get(self, window: int) -> Optional[float]:
        return getattr(self, f"ma{window}")

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {
            "ma5": self.ma5,
            "ma10": self.ma10,
            "ma20": self.ma20,
            "ma60": self.ma60,
            "ma120": self.ma120,
            "ma240": self.ma240,
        }


class ValuationStatus(str, Enum):
    """Where the current price sits relative to the valuation band."""
    CHEAP = "cheap"
    FAIR = "fair"
    EXPENSIVE = "expensive"
    NO_DATA = "no_data"

    @property
    def label(self) -> str:
        return {
            ValuationStatus.CHEAP: "Cheap",
            ValuationStatus.FAIR: "Fair",
            ValuationStatus.EXPENSIVE: "Expensive",
            ValuationStatus.NO_DATA: "No data",
        }[self]


@dataclass(frozen=True)
class FetchResult:
    """
    Raw output of a data source for one symbol.

    price_records: mappings with "date" and "close"
    pe_records: mappings with "date" and "pe"
    """
    price_records: Sequence[Dict[str, Any]]
    pe_records: Sequence[Dict[str, Any]]
    display_name: str
    source: str
    is_synthetic: bool = False


@dataclass(frozen=True)
class StockSnapshot:
    """Immutable result of one search. Replaced, never mutated, by the next search."""
    symbol: str
    display_name: str
    current_price: float
    price_change: float
    current_pe: Optional[float]
    source: str
    is_synthetic: bool
    history: HistorySeries
    valuation: ValuationBand
    fetched_at: datetime = field(default_factory=datetime.now)

    @property
    def is_real(self) -> bool:
        return not self.is_synthetic


@dataclass(frozen=True)
class AnalystInsight:
    """Risk level, trend read and commentary for a snapshot."""
    risk_level: str  # "low", "medium", "high"
    long_term_bull: Optional[bool]
    short_term_bull: Optional[bool]
    commentary: str


@dataclass(frozen=True)
class AnalysisResult:
    """Everything presentation needs for one search."""
    snapshot: StockSnapshot
    moving_averages: MovingAverageSet
    status: ValuationStatus
    cursor_position: float
    insight: AnalystInsight
    advisory: Optional[str] = None
