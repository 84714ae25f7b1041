"""pipwatch.backtest.simulator

Long-only position replay.

States: FLAT, LONG. Initial FLAT, no terminal state.

- FLAT + BUY  -> LONG, entry at this price
- LONG + SELL -> FLAT, realize pips * pip_value, append a trade
- anything else leaves the position alone

Replay is strictly chronological and sequential. A position still open when
the input runs out stays open; unrealized P&L never touches the balance.
No fees, no slippage, one position at a time.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pipwatch.core.config import SimulationConfig
from pipwatch.core.types import PositionStatus, Signal, SignalPoint, StrategyId


def calculate_pips(entry_price: float, exit_price: float, *, pip_size: float = 0.0001) -> int:
    # Round half up, so +x.5 and -x.5 both move toward +inf.
    return int(math.floor((exit_price - entry_price) / pip_size + 0.5))


@dataclass(frozen=True, slots=True)
class TradeRecord:
    entry_price: float
    exit_price: float
    pips: int
    profit: float
    timestamp: datetime  # exit bar
    strategy: StrategyId

    def as_dict(self) -> dict[str, Any]:
        return {
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "pips": self.pips,
            "profit": self.profit,
            "timestamp": self.timestamp.isoformat(),
            "strategy": str(self.strategy),
        }


@dataclass(slots=True)
class Position:
    status: PositionStatus = PositionStatus.FLAT
    entry_price: float | None = None

    def open(self, price: float) -> None:
        self.status = PositionStatus.LONG
        self.entry_price = float(price)

    def close(self) -> None:
        self.status = PositionStatus.FLAT
        self.entry_price = None


@dataclass(frozen=True, slots=True)
class SimResult:
    strategy: StrategyId
    balance: float
    position: PositionStatus
    entry_price: float | None
    trades: tuple[TradeRecord, ...]
    total_pnl: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "strategy": str(self.strategy),
            "balance": self.balance,
            "position": str(self.position),
            "entry_price": self.entry_price,
            "trades": [t.as_dict() for t in self.trades],
            "total_pnl": self.total_pnl,
        }


@dataclass(slots=True)
class PositionSimulator:
    """Owns one private Position and trade ledger per run."""

    strategy: StrategyId
    cfg: SimulationConfig = field(default_factory=SimulationConfig)
    position: Position = field(default_factory=Position)
    trades: list[TradeRecord] = field(default_factory=list)
    balance: float = 0.0
    total_pnl: float = 0.0

    def __post_init__(self) -> None:
        self.balance = float(self.cfg.starting_balance)

    def step(self, point: SignalPoint) -> TradeRecord | None:
        sig = Signal(point.signal)

        if sig is Signal.BUY and self.position.status is PositionStatus.FLAT:
            self.position.open(point.price)
            return None

        if sig is Signal.SELL and self.position.status is PositionStatus.LONG:
            entry = self.position.entry_price
            assert entry is not None
            pips = calculate_pips(entry, float(point.price), pip_size=self.cfg.pip_size)
            trade = TradeRecord(
                entry_price=entry,
                exit_price=float(point.price),
                pips=pips,
                profit=pips * float(self.cfg.pip_value),
                timestamp=point.timestamp,
                strategy=self.strategy,
            )
            self.trades.append(trade)
            self.balance += trade.profit
            self.total_pnl += trade.profit
            self.position.close()
            return trade

        return None

    def result(self) -> SimResult:
        return SimResult(
            strategy=self.strategy,
            balance=self.balance,
            position=self.position.status,
            entry_price=self.position.entry_price,
            trades=tuple(self.trades),
            total_pnl=self.total_pnl,
        )


def simulate(
    points: Iterable[SignalPoint],
    *,
    strategy: StrategyId,
    cfg: SimulationConfig | None = None,
    newest_first: bool = False,
) -> SimResult:
    pts = list(points)
    if newest_first:
        pts.reverse()

    for prev, cur in zip(pts, pts[1:]):
        if cur.timestamp <= prev.timestamp:
            raise ValueError("signal points must be in chronological order")

    sim = PositionSimulator(strategy=strategy, cfg=cfg or SimulationConfig())
    for pt in pts:
        sim.step(pt)
    return sim.result()
