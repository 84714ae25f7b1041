"""pipwatch.backtest.strategies.ma_crossover

Moving average crossover:
- BUY when fast SMA > slow SMA
- SELL otherwise

Defined once both averages have a value (from index slow - 1).
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.indicators import sma
from pipwatch.backtest.strategies.base import Strategy, StrategyResult, empty_result
from pipwatch.backtest.strategies.registry import register
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


@register(StrategyId.MA)
@dataclass(frozen=True, slots=True)
class MACrossoverStrategy(Strategy):
    id: StrategyId = StrategyId.MA
    fast: int = 5
    slow: int = 20

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> MACrossoverStrategy:
        return cls(fast=cfg.ma.fast, slow=cfg.ma.slow)

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        close = np.asarray(close, dtype=np.float64)
        fast = int(self.fast)
        slow = int(self.slow)
        start = max(fast, slow) - 1
        if fast <= 0 or slow <= 0 or close.shape[0] <= start:
            return empty_result(start=start)

        f = sma(close, fast)
        s = sma(close, slow)
        out: list[Signal] = []
        for fv, sv in zip(f[start:], s[start:]):
            assert fv is not None and sv is not None
            out.append(Signal.BUY if fv > sv else Signal.SELL)
        return StrategyResult(signals=tuple(out), start=start)
