"""pipwatch.backtest.strategies.macd_cross

MACD vs signal line:
- BUY when macd > signal
- SELL otherwise

No HOLD state. Signals start at the slow EMA period; EMA values are defined
before that but still dominated by their seed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.indicators import macd
from pipwatch.backtest.strategies.base import Strategy, StrategyResult, empty_result
from pipwatch.backtest.strategies.registry import register
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


@register(StrategyId.MACD)
@dataclass(frozen=True, slots=True)
class MACDStrategy(Strategy):
    id: StrategyId = StrategyId.MACD
    fast: int = 12
    slow: int = 26
    signal: int = 9

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> MACDStrategy:
        return cls(fast=cfg.macd.fast, slow=cfg.macd.slow, signal=cfg.macd.signal)

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        close = np.asarray(close, dtype=np.float64)
        slow = int(self.slow)
        if close.shape[0] <= slow:
            return empty_result(start=slow)

        res = macd(close, fast=int(self.fast), slow=slow, signal=int(self.signal))
        out = tuple(
            Signal.BUY if m > s else Signal.SELL
            for m, s in zip(res.macd_line[slow:], res.signal_line[slow:])
        )
        return StrategyResult(signals=out, start=slow)
