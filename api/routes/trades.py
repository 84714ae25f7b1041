from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_config, get_prices
from api.schemas.signals import PerformanceStatsModel, StatsResponse
from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.performance import evaluate_performance
from pipwatch.core.config import Config

router = APIRouter(prefix="/trades")


@router.get("", response_model=StatsResponse)
def get_trade_stats(
    strategy: str = Query("momentum", description="Unknown values fall back to MOMENTUM"),
    cfg: Config = Depends(get_config),
    series: PriceSeries = Depends(get_prices),
) -> StatsResponse:
    sid, stats = evaluate_performance(series.close, strategy, cfg.strategies)
    return StatsResponse(strategy=str(sid), stats=PerformanceStatsModel(**stats.as_dict()))
