"""pipwatch.backtest.engine

Backtest entry point.

Per strategy:
- strategy generates signals over the close series
- signals are annotated onto the trailing window of prices
- performance scores the full signal sequence
- simulator replays the annotated window

``run_all`` fans strategies out over a thread pool (they share nothing but
the read-only price snapshot) and fans results back in request order.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.performance import PerformanceStats, evaluate_performance
from pipwatch.backtest.simulator import SimResult, simulate
from pipwatch.backtest.strategies import build_strategy, resolve_strategy
from pipwatch.core.config import Config
from pipwatch.core.types import Signal, SignalPoint, StrategyId

DEFAULT_WINDOW = 30


@dataclass(frozen=True, slots=True)
class StrategyReport:
    strategy: StrategyId
    signals: tuple[SignalPoint, ...]
    stats: PerformanceStats
    simulation: SimResult

    def as_dict(self) -> dict[str, Any]:
        return {
            "strategy": str(self.strategy),
            "signals": [signal_point_dict(p) for p in self.signals],
            "stats": self.stats.as_dict(),
            "simulation": self.simulation.as_dict(),
        }


def signal_point_dict(p: SignalPoint) -> dict[str, Any]:
    return {"timestamp": p.timestamp.isoformat(), "price": p.price, "signal": int(p.signal)}


def signal_series(
    series: PriceSeries,
    strategy: str | StrategyId,
    cfg: Config | None = None,
    *,
    window: int | None = DEFAULT_WINDOW,
) -> list[SignalPoint]:
    """Signal-annotated trailing window, oldest first.

    Raises UnknownStrategyError for an unrecognized strategy. Bars inside the
    strategy's warm-up are HOLD.
    """

    cfg = cfg or Config()
    sid = resolve_strategy(strategy)
    res = build_strategy(sid, cfg.strategies).generate(close=series.close)

    n = len(series)
    first = 0 if window is None else max(0, n - window)
    signals = res.aligned(n, fill=Signal.HOLD)
    out: list[SignalPoint] = []
    for i in range(first, n):
        out.append(
            SignalPoint(
                timestamp=series.timestamps[i],
                price=float(series.close[i]),
                signal=signals[i],
            )
        )
    return out


def run_strategy(
    series: PriceSeries,
    strategy: str | StrategyId,
    cfg: Config | None = None,
    *,
    window: int | None = DEFAULT_WINDOW,
) -> StrategyReport:
    cfg = cfg or Config()
    sid = resolve_strategy(strategy)
    points = signal_series(series, sid, cfg, window=window)
    _, stats = evaluate_performance(series.close, sid, cfg.strategies)
    sim = simulate(points, strategy=sid, cfg=cfg.simulation)
    return StrategyReport(strategy=sid, signals=tuple(points), stats=stats, simulation=sim)


def run_all(
    series: PriceSeries,
    strategies: Sequence[str | StrategyId],
    cfg: Config | None = None,
    *,
    window: int | None = DEFAULT_WINDOW,
    max_workers: int | None = None,
) -> dict[StrategyId, StrategyReport]:
    cfg = cfg or Config()
    sids = [resolve_strategy(s) for s in strategies]
    if not sids:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers or len(sids)) as pool:
        futures = {sid: pool.submit(run_strategy, series, sid, cfg, window=window) for sid in sids}
        return {sid: fut.result() for sid, fut in futures.items()}
