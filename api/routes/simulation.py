from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_config, get_prices
from api.errors import ApiError
from api.schemas.common import ErrorResponse
from api.schemas.signals import SimulationResponse
from pipwatch.backtest.engine import signal_series
from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.simulator import simulate
from pipwatch.backtest.strategies import resolve_strategy
from pipwatch.core.config import Config
from pipwatch.core.exceptions import UnknownStrategyError

router = APIRouter(prefix="/simulation")


@router.get("", response_model=SimulationResponse, responses={400: {"model": ErrorResponse}})
def get_simulation(
    strategy: str = Query("MACD"),
    window: int | None = Query(None, ge=1, le=1000),
    cfg: Config = Depends(get_config),
    series: PriceSeries = Depends(get_prices),
) -> SimulationResponse:
    try:
        sid = resolve_strategy(strategy)
    except UnknownStrategyError as e:
        raise ApiError.unknown_strategy(e) from e

    points = signal_series(series, sid, cfg, window=window or cfg.api.signal_window)
    res = simulate(points, strategy=sid, cfg=cfg.simulation)
    return SimulationResponse(**res.as_dict())
