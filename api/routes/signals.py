from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_config, get_prices
from api.errors import ApiError
from api.schemas.common import ErrorResponse
from api.schemas.signals import SignalPointResponse
from pipwatch.backtest.engine import signal_point_dict, signal_series
from pipwatch.backtest.io import PriceSeries
from pipwatch.core.config import Config
from pipwatch.core.exceptions import UnknownStrategyError

router = APIRouter(prefix="/signals")


@router.get("", response_model=list[SignalPointResponse], responses={400: {"model": ErrorResponse}})
def get_signals(
    strategy: str = Query("MACD", description="MACD | RSI | MA | HYBRID | MOMENTUM"),
    window: int | None = Query(None, ge=1, le=1000),
    cfg: Config = Depends(get_config),
    series: PriceSeries = Depends(get_prices),
) -> list[SignalPointResponse]:
    """Trailing window of prices with signals, newest first."""

    try:
        points = signal_series(series, strategy, cfg, window=window or cfg.api.signal_window)
    except UnknownStrategyError as e:
        raise ApiError.unknown_strategy(e) from e
    return [SignalPointResponse(**signal_point_dict(p)) for p in reversed(points)]
