"""pipwatch.core.types

Lightweight enums and dataclasses shared by every layer.

Pydantic models own IO boundaries; dataclasses keep runtime lean.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum


class Signal(IntEnum):
    SELL = -1
    HOLD = 0
    BUY = 1

    @property
    def label(self) -> str:
        return self.name


class StrategyId(StrEnum):
    MACD = "MACD"
    RSI = "RSI"
    MA = "MA"
    HYBRID = "HYBRID"
    MOMENTUM = "MOMENTUM"


class PositionStatus(StrEnum):
    FLAT = "FLAT"
    LONG = "LONG"


@dataclass(frozen=True, slots=True)
class PricePoint:
    timestamp: datetime
    price: float


@dataclass(frozen=True, slots=True)
class SignalPoint:
    """A price point annotated with the strategy decision at that step."""

    timestamp: datetime
    price: float
    signal: Signal
