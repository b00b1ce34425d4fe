"""Web API - FastAPI application exposing the valuation engine as JSON."""

import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from .analytics.chart import render_valuation_chart
from .analytics.valuation import thresholds
from .config import Config
from .domain.models import AnalysisResult
from .http_client import close_http_client
from .services.formatters import MA_LABELS, format_analysis_text, format_band_lines
from .services.snapshot_service import SnapshotService
from .utils import format_change, format_number, normalize_symbol, validate_symbol

logger = logging.getLogger(__name__)

# Service is injected by the caller (see main.build_service); built from env on first use otherwise
_service: Optional[SnapshotService] = None


def configure_api(service: SnapshotService) -> None:
    """Configure API with the service used to answer requests."""
    global _service
    _service = service


def _get_service() -> SnapshotService:
    global _service
    if _service is None:
        from .main import build_service

        _service = build_service(Config.from_env())
    return _service


# ============== PYDANTIC MODELS ==============

class BandOut(BaseModel):
    low_pe: float
    high_pe: float
    fair_pe: float
    eps: float
    cheap_price: float
    fair_price: float
    expensive_price: float
    lower_threshold: float
    upper_threshold: float
    is_default: bool
    display: Dict[str, str]


class MovingAverageOut(BaseModel):
    window: int
    label: str
    value: Optional[float] = None
    display: str
    price_above: Optional[bool] = None


class InsightOut(BaseModel):
    risk_level: str
    long_term_bull: Optional[bool] = None
    short_term_bull: Optional[bool] = None
    commentary: str


class HistoryPointOut(BaseModel):
    date: str
    close: float
    pe: Optional[float] = None


class StockResponse(BaseModel):
    symbol: str
    display_name: str
    current_price: float
    current_price_display: str
    price_change: float
    price_change_display: str
    current_pe: Optional[float] = None
    source: str
    is_synthetic: bool
    status: str
    status_label: str
    cursor_position: float
    valuation: BandOut
    moving_averages: List[MovingAverageOut]
    insight: InsightOut
    advisory: Optional[str] = None
    history: Optional[List[HistoryPointOut]] = None


def to_response(result: AnalysisResult, include_history: bool = False) -> StockResponse:
    """Convert an AnalysisResult into the JSON response model."""
    snap = result.snapshot
    band = snap.valuation
    lower, upper = thresholds(band)

    mas = []
    for key, value in result.moving_averages.as_dict().items():
        window = int(key[2:])
        mas.append(MovingAverageOut(
            window=window,
            label=MA_LABELS[window],
            value=value,
            display=format_number(value, 1),
            price_above=None if value is None else snap.current_price > value,
        ))

    history = None
    if include_history:
        history = [
            HistoryPointOut(date=record.date.isoformat(), close=record.close, pe=record.pe)
            for record in snap.history.newest_first
        ]

    return StockResponse(
        symbol=snap.symbol,
        display_name=snap.display_name,
        current_price=snap.current_price,
        current_price_display=format_number(snap.current_price),
        price_change=snap.price_change,
        price_change_display=format_change(snap.price_change),
        current_pe=snap.current_pe,
        source=snap.source,
        is_synthetic=snap.is_synthetic,
        status=result.status.value,
        status_label=result.status.label,
        cursor_position=result.cursor_position,
        valuation=BandOut(
            low_pe=band.low_pe,
            high_pe=band.high_pe,
            fair_pe=band.fair_pe,
            eps=band.eps,
            cheap_price=band.cheap_price,
            fair_price=band.fair_price,
            expensive_price=band.expensive_price,
            lower_threshold=lower,
            upper_threshold=upper,
            is_default=band.is_default,
            display=format_band_lines(band),
        ),
        moving_averages=mas,
        insight=InsightOut(
            risk_level=result.insight.risk_level,
            long_term_bull=result.insight.long_term_bull,
            short_term_bull=result.insight.short_term_bull,
            commentary=result.insight.commentary,
        ),
        advisory=result.advisory,
        history=history,
    )


# ============== FASTAPI APP ==============

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the pooled HTTP client on shutdown."""
    yield
    await close_http_client()


web_api = FastAPI(title="P/E Band Valuation API", lifespan=lifespan)


def _checked_symbol(symbol: str) -> str:
    symbol = normalize_symbol(symbol)
    if not validate_symbol(symbol):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid symbol. Example: 2330, 0050, AAPL",
        )
    return symbol


@web_api.get("/healthz")
async def healthz():
    """Unauthenticated health probe endpoint for external pingers."""
    return {"status": "ok"}


@web_api.get("/api/stock/{symbol}", response_model=StockResponse)
async def get_stock(symbol: str, include_history: bool = False):
    """Valuation, moving averages and commentary for one symbol."""
    symbol = _checked_symbol(symbol)
    result = await _get_service().search(symbol)
    return to_response(result, include_history=include_history)


@web_api.get("/api/stock/{symbol}/text", response_class=PlainTextResponse)
async def get_stock_text(symbol: str):
    """Plain-text report for one symbol."""
    symbol = _checked_symbol(symbol)
    result = await _get_service().search(symbol)
    return format_analysis_text(result)


@web_api.get("/api/stock/{symbol}/chart")
async def get_stock_chart(symbol: str):
    """PNG chart of price, moving averages and the valuation band."""
    symbol = _checked_symbol(symbol)
    result = await _get_service().search(symbol)
    png = render_valuation_chart(result.snapshot)
    if png is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not enough history to chart")
    return Response(content=png, media_type="image/png")
