"""pipwatch.backtest.strategies.base

Strategy contract.

A strategy is a pure function over a close series. It emits one discrete
signal per eligible bar:

- +1 = BUY
-  0 = HOLD
- -1 = SELL

Strategies have different warm-ups, so a result carries ``start``: the price
index of its first signal. Align results by that offset, never by raw
position in the signal list.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import Signal, StrategyId


@dataclass(frozen=True, slots=True)
class StrategyResult:
    signals: tuple[Signal, ...]
    start: int  # price index of signals[0]

    def __len__(self) -> int:
        return len(self.signals)

    def at(self, index: int) -> Signal | None:
        """Signal at price ``index``, or None inside the warm-up / past the end."""
        k = index - self.start
        if k < 0 or k >= len(self.signals):
            return None
        return self.signals[k]

    def aligned(self, length: int, *, fill: Signal = Signal.HOLD) -> list[Signal]:
        """Signals padded to a price series of ``length`` points."""
        return [s if (s := self.at(i)) is not None else fill for i in range(length)]


def empty_result(start: int) -> StrategyResult:
    return StrategyResult(signals=(), start=start)


class Strategy:
    id: StrategyId = StrategyId.MOMENTUM

    @classmethod
    def from_config(cls, cfg: StrategiesConfig) -> Strategy:
        raise NotImplementedError

    def generate(self, *, close: np.ndarray) -> StrategyResult:
        raise NotImplementedError
