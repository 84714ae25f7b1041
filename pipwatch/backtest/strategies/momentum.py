"""pipwatch.backtest.strategies.momentum

Bar-to-bar momentum:
- BUY if close > previous close
- SELL otherwise

Always directional. Also the fallback strategy at the scoring boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.strategies.base import Strategy, StrategyResult, empty_result
from pipwatch.backtest.strategies.registry import register
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


@register(StrategyId.MOMENTUM)
@dataclass(frozen=True, slots=True)
class MomentumStrategy(Strategy):
    id: StrategyId = StrategyId.MOMENTUM

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> MomentumStrategy:
        return cls()

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        close = np.asarray(close, dtype=np.float64)
        if close.size < 2:
            return empty_result(start=1)

        up = close[1:] > close[:-1]
        return StrategyResult(signals=tuple(Signal.BUY if u else Signal.SELL for u in up), start=1)
