from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import Request

from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.monitor import AlertSink, sink_from_config
from pipwatch.core.config import Config
from pipwatch.market.quotes import AlphaVantageSource, PriceSource, load_prices


@lru_cache
def _load_config() -> Config:
    return Config.load(Path.cwd())


def get_config(request: Request) -> Config:
    cfg = getattr(request.app.state, "config", None)
    return cfg or _load_config()


def get_price_source(request: Request) -> PriceSource:
    src = getattr(request.app.state, "price_source", None)
    if src is not None:
        return src
    return AlphaVantageSource(get_config(request).quotes)


def get_alert_sink(request: Request) -> AlertSink:
    sink = getattr(request.app.state, "alert_sink", None)
    return sink or sink_from_config(get_config(request).monitor)


def get_prices(request: Request) -> PriceSeries:
    """Fresh series per request; upstream failure yields the synthetic series."""

    cfg = get_config(request)
    return load_prices(get_price_source(request), fallback_points=cfg.quotes.fallback_points)
