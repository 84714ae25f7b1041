"""pipwatch.backtest.strategies.rsi_threshold

RSI thresholds:
- BUY when RSI < oversold (30)
- SELL when RSI > overbought (70)
- HOLD otherwise

Uses the windowed RSI, evaluated per point on the history up to that point.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.indicators import rsi_at
from pipwatch.backtest.strategies.base import Strategy, StrategyResult, empty_result
from pipwatch.backtest.strategies.registry import register
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


def classify_rsi(value: float | None, *, oversold: float, overbought: float) -> Signal:
    if value is None:
        return Signal.HOLD
    if value < oversold:
        return Signal.BUY
    if value > overbought:
        return Signal.SELL
    return Signal.HOLD


@register(StrategyId.RSI)
@dataclass(frozen=True, slots=True)
class RSIThresholdStrategy(Strategy):
    id: StrategyId = StrategyId.RSI
    period: int = 14
    oversold: float = 30.0
    overbought: float = 70.0

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> RSIThresholdStrategy:
        return cls(period=cfg.rsi.period, oversold=cfg.rsi.oversold, overbought=cfg.rsi.overbought)

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        close = np.asarray(close, dtype=np.float64)
        period = int(self.period)
        if period <= 0 or close.shape[0] <= period:
            return empty_result(start=max(period, 0))

        out = [
            classify_rsi(
                rsi_at(close[: i + 1], period),
                oversold=float(self.oversold),
                overbought=float(self.overbought),
            )
            for i in range(period, close.shape[0])
        ]
        return StrategyResult(signals=tuple(out), start=period)
