from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SignalPointResponse(BaseModel):
    timestamp: datetime
    price: float
    signal: Literal[-1, 0, 1]


class PerformanceStatsModel(BaseModel):
    total_return: float
    avg_pnl_pct: float
    win_rate: float


class StatsResponse(BaseModel):
    strategy: str
    stats: PerformanceStatsModel


class TradeResponse(BaseModel):
    entry_price: float
    exit_price: float
    pips: int
    profit: float
    timestamp: datetime
    strategy: str


class SimulationResponse(BaseModel):
    strategy: str
    balance: float
    position: Literal["FLAT", "LONG"]
    entry_price: float | None = None
    trades: list[TradeResponse] = Field(default_factory=list)
    total_pnl: float


class MonitorResponse(BaseModel):
    best_strategy: str
    performances: dict[str, float]
    latest_signal: Literal[-1, 0, 1] | None = None
    previous_signal: Literal[-1, 0, 1] | None = None
    signal_changed: bool
    alert_sent: bool
    timestamp: datetime
