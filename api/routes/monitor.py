from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_alert_sink, get_config, get_prices
from api.schemas.signals import MonitorResponse
from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.monitor import AlertSink, run_monitor
from pipwatch.core.config import Config

router = APIRouter(prefix="/monitor")


@router.get("", response_model=MonitorResponse)
def get_monitor(
    cfg: Config = Depends(get_config),
    series: PriceSeries = Depends(get_prices),
    sink: AlertSink = Depends(get_alert_sink),
) -> MonitorResponse:
    return MonitorResponse(**run_monitor(series, cfg, sink=sink).as_dict())
