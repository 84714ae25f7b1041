from __future__ import annotations

import numpy as np
import pytest

from pipwatch.backtest.performance import (
    BREAKEVEN,
    CANDIDATES,
    compute_stats,
    evaluate_performance,
    score_candidates,
    select_best,
    step_returns,
)
from pipwatch.backtest.strategies import build_strategy
from pipwatch.core.types import StrategyId


def test_step_returns():
    r = step_returns([1.0, 1.1, 0.99])
    assert r == pytest.approx([0.1, -0.1])
    assert step_returns([1.0]).size == 0


def test_total_return_is_multiplicative():
    stats = compute_stats([1, 1], [0.1, -0.1])
    assert stats.total_return == pytest.approx(1.1 * 0.9)
    assert stats.total_return == pytest.approx(0.99)
    assert stats.avg_pnl_pct == pytest.approx(0.0)
    assert stats.win_rate == pytest.approx(0.5)


def test_signals_truncate_to_returns():
    stats = compute_stats([1, -1, 1, 1], [0.02, -0.01])
    # strategy returns: +0.02, +0.01
    assert stats.total_return == pytest.approx(1.02 * 1.01)
    assert stats.win_rate == 1.0


def test_hold_contributes_zero_and_is_not_a_win():
    stats = compute_stats([0, 0, -1], [0.05, -0.05, 0.01])
    assert stats.total_return == pytest.approx(0.99)
    assert stats.win_rate == pytest.approx(0.0)
    assert stats.avg_pnl_pct == pytest.approx(-1.0 / 3.0)


def test_empty_input_is_breakeven():
    stats = compute_stats([], [])
    assert stats.total_return == BREAKEVEN
    assert stats.avg_pnl_pct == 0.0
    assert stats.win_rate == 0.0


def test_select_best_ties_go_to_canonical_order():
    perf = {StrategyId.MACD: 1.2, StrategyId.RSI: 0.9, StrategyId.MA: 1.2}
    assert select_best(perf) is StrategyId.MACD


def test_select_best_strictly_greatest():
    perf = {StrategyId.MACD: 0.98, StrategyId.RSI: 1.01, StrategyId.MA: 1.02}
    assert select_best(perf) is StrategyId.MA


def test_select_best_candidate_list_is_extendable():
    perf = {StrategyId.MACD: 1.0, StrategyId.RSI: 1.0, StrategyId.MA: 1.0, StrategyId.HYBRID: 1.05}
    assert select_best(perf, [*CANDIDATES, StrategyId.HYBRID]) is StrategyId.HYBRID


def test_failing_scorer_counts_as_breakeven():
    def scorer(sid: StrategyId) -> float:
        if sid is StrategyId.RSI:
            raise RuntimeError("boom")
        return 0.95

    perf = score_candidates(scorer)
    assert perf == {StrategyId.MACD: 0.95, StrategyId.RSI: BREAKEVEN, StrategyId.MA: 0.95}
    assert select_best(perf) is StrategyId.RSI


def test_evaluate_performance_unknown_strategy_falls_back_to_momentum():
    close = np.array([1.00, 1.01, 1.02, 1.00, 0.98, 1.05])
    sid, stats = evaluate_performance(close, "nonsense")
    assert sid is StrategyId.MOMENTUM

    # momentum [+1, +1, -1, -1, +1] rides every step in the right direction
    assert stats == compute_stats([1, 1, -1, -1, 1], step_returns(close))
    assert stats.total_return == pytest.approx(1.13657, rel=1e-4)
    assert stats.avg_pnl_pct == pytest.approx(2.6187, rel=1e-3)
    assert stats.win_rate == 1.0


@pytest.mark.parametrize("sid", [StrategyId.MACD, StrategyId.RSI, StrategyId.MA])
def test_signal_earns_the_step_ending_at_its_bar(hourly_series, sid):
    close = hourly_series.close
    res = build_strategy(sid).generate(close=close)
    _, stats = evaluate_performance(close, sid)

    r = step_returns(close)
    # signal at price index j pairs with r[j-1] = (P[j] - P[j-1]) / P[j-1]
    pairs = [(int(res.at(j)), r[j - 1]) for j in range(res.start, len(close))]
    expected = compute_stats([s for s, _ in pairs], [x for _, x in pairs])
    assert stats.total_return == pytest.approx(expected.total_return)
    assert stats.win_rate == pytest.approx(expected.win_rate)


def test_evaluate_performance_short_series_degrades_gracefully():
    sid, stats = evaluate_performance(np.array([1.0, 1.01, 1.02]), StrategyId.MACD)
    assert sid is StrategyId.MACD
    assert stats.total_return == BREAKEVEN
