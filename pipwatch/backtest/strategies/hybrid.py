"""pipwatch.backtest.strategies.hybrid

Hybrid: trend + momentum exhaustion + volatility extremes.

- trend: close vs SMA-50
- pullback: RSI-14 < 40 while below SMA-50 (recorded only, does not gate)
- overextended: close outside Bollinger 20/2

Decision:
- BUY when in trend and not overextended
- SELL when not in trend and overextended
- HOLD otherwise, and wherever any indicator is undefined

Full length output (start = 0).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.indicators import bollinger, rsi, sma
from pipwatch.backtest.strategies.base import Strategy, StrategyResult
from pipwatch.backtest.strategies.registry import register
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


@dataclass(frozen=True, slots=True)
class HybridReading:
    in_trend: bool
    in_pullback: bool
    overextended: bool


@register(StrategyId.HYBRID)
@dataclass(frozen=True, slots=True)
class HybridStrategy(Strategy):
    id: StrategyId = StrategyId.HYBRID
    sma_period: int = 50
    rsi_period: int = 14
    bb_period: int = 20
    bb_multiplier: float = 2.0
    pullback_rsi: float = 40.0

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> HybridStrategy:
        h = cfg.hybrid
        return cls(
            sma_period=h.sma_period,
            rsi_period=h.rsi_period,
            bb_period=h.bb_period,
            bb_multiplier=h.bb_multiplier,
            pullback_rsi=h.pullback_rsi,
        )

    def readings(self, close: np.ndarray) -> list[HybridReading | None]:
        """Per-bar indicator state; None where any indicator is undefined."""

        trend = sma(close, int(self.sma_period))
        strength = rsi(close, int(self.rsi_period))
        bands = bollinger(close, int(self.bb_period), float(self.bb_multiplier))

        out: list[HybridReading | None] = []
        for i, px in enumerate(close.tolist()):
            mid, r, up, lo = trend[i], strength[i], bands.upper[i], bands.lower[i]
            if mid is None or r is None or up is None or lo is None:
                out.append(None)
                continue
            out.append(
                HybridReading(
                    in_trend=px > mid,
                    in_pullback=r < float(self.pullback_rsi) and px < mid,
                    overextended=px > up or px < lo,
                )
            )
        return out

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        close = np.asarray(close, dtype=np.float64)
        out: list[Signal] = []
        for rd in self.readings(close):
            if rd is None:
                out.append(Signal.HOLD)
            elif rd.in_trend and not rd.overextended:
                out.append(Signal.BUY)
            elif not rd.in_trend and rd.overextended:
                out.append(Signal.SELL)
            else:
                out.append(Signal.HOLD)
        return StrategyResult(signals=tuple(out), start=0)
