"""pipwatch.backtest.performance

Performance stats + best-strategy selection.

Stats are a pure function of (signal sequence, return sequence):
- total_return: compounded growth factor, 1.0 = breakeven
- avg_pnl_pct: mean per-step strategy return, in percent
- win_rate: share of steps with a positive strategy return

This is the scoring boundary: unknown strategy ids fall back to MOMENTUM,
and a candidate whose scoring fails counts as breakeven.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from pipwatch.backtest.strategies import build_strategy, resolve_strategy_or_default
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.types import StrategyId

logger = logging.getLogger(__name__)

CANDIDATES: tuple[StrategyId, ...] = (StrategyId.MACD, StrategyId.RSI, StrategyId.MA)

BREAKEVEN = 1.0


@dataclass(frozen=True, slots=True)
class PerformanceStats:
    total_return: float
    avg_pnl_pct: float
    win_rate: float

    def as_dict(self) -> dict[str, float]:
        return {"total_return": self.total_return, "avg_pnl_pct": self.avg_pnl_pct, "win_rate": self.win_rate}


def step_returns(close: Sequence[float] | np.ndarray) -> np.ndarray:
    """R[i] = (P[i+1] - P[i]) / P[i]; length n - 1."""

    c = np.asarray(close, dtype=np.float64)
    if c.size < 2:
        return np.zeros(0, dtype=np.float64)
    return (c[1:] - c[:-1]) / c[:-1]


def compute_stats(signals: Sequence[int], returns: Sequence[float] | np.ndarray) -> PerformanceStats:
    r = np.asarray(returns, dtype=np.float64)
    n = min(len(signals), r.size)
    if n == 0:
        return PerformanceStats(total_return=BREAKEVEN, avg_pnl_pct=0.0, win_rate=0.0)

    strat_ret = np.asarray([int(s) for s in signals[:n]], dtype=np.float64) * r[:n]

    # Ordered compounding, one step at a time.
    growth = 1.0
    for sr in strat_ret:
        growth *= 1.0 + float(sr)

    return PerformanceStats(
        total_return=growth,
        avg_pnl_pct=float(np.mean(strat_ret)) * 100.0,
        win_rate=float(np.count_nonzero(strat_ret > 0.0)) / float(n),
    )


def evaluate_performance(
    close: Sequence[float] | np.ndarray,
    strategy: str | StrategyId | None,
    cfg: StrategiesConfig | None = None,
) -> tuple[StrategyId, PerformanceStats]:
    """Score one strategy over a close series.

    The signal at price index j earns the return of the step ending at j
    (j-1 -> j); a strategy starting at index 0 pairs with the first step.
    """

    sid = resolve_strategy_or_default(strategy)
    c = np.asarray(close, dtype=np.float64)
    res = build_strategy(sid, cfg).generate(close=c)

    returns = step_returns(c)[max(res.start - 1, 0) :]
    return sid, compute_stats(res.signals, returns)


def select_best(
    performances: Mapping[StrategyId, float],
    candidates: Sequence[StrategyId] = CANDIDATES,
) -> StrategyId:
    """Strictly greatest total_return; ties go to the earliest candidate."""

    if not candidates:
        raise ValueError("candidates must not be empty")

    best = candidates[0]
    best_score = performances.get(best, BREAKEVEN)
    for sid in candidates[1:]:
        score = performances.get(sid, BREAKEVEN)
        if score > best_score:
            best, best_score = sid, score
    return best


def score_candidates(
    scorer: Callable[[StrategyId], float],
    candidates: Sequence[StrategyId] = CANDIDATES,
) -> dict[StrategyId, float]:
    """total_return per candidate; a failing scorer contributes BREAKEVEN."""

    out: dict[StrategyId, float] = {}
    for sid in candidates:
        try:
            out[sid] = float(scorer(sid))
        except Exception:  # noqa: BLE001 - selection stays total
            logger.exception("strategy_score_failed", extra={"strategy": str(sid)})
            out[sid] = BREAKEVEN
    return out
