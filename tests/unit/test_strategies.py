from __future__ import annotations

import numpy as np
import pytest

from pipwatch.backtest.indicators import macd, rsi_at, sma
from pipwatch.backtest.strategies import (
    HybridStrategy,
    MACDStrategy,
    MACrossoverStrategy,
    MomentumStrategy,
    RSIThresholdStrategy,
    StrategyResult,
    build_strategy,
    classify_rsi,
    registered,
    resolve_strategy,
    resolve_strategy_or_default,
)
from pipwatch.backtest.strategies.base import Strategy
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.exceptions import UnknownStrategyError
from pipwatch.core.types import Signal, StrategyId


def _wave(n: int) -> np.ndarray:
    i = np.arange(n, dtype=np.float64)
    return 0.92 + np.sin(i / 6.0) * 0.01


def test_every_strategy_id_is_registered():
    assert registered() == list(StrategyId)


def test_momentum_scenario():
    close = np.array([1.00, 1.01, 1.02, 1.00, 0.98, 1.05])
    res = MomentumStrategy().generate(close=close)
    assert res.start == 1
    assert [int(s) for s in res.signals] == [1, 1, -1, -1, 1]


def test_momentum_equal_prices_are_sell():
    res = MomentumStrategy().generate(close=np.array([1.0, 1.0]))
    assert res.signals == (Signal.SELL,)


def test_ma_crossover_matches_sma_comparison():
    close = _wave(60)
    res = MACrossoverStrategy(fast=5, slow=20).generate(close=close)
    f, s = sma(close, 5), sma(close, 20)
    assert res.start == 19
    assert len(res) == 60 - 19
    for i in range(19, 60):
        assert res.at(i) == (Signal.BUY if f[i] > s[i] else Signal.SELL)


def test_ma_crossover_periods_are_parameters():
    close = _wave(60)
    res = MACrossoverStrategy(fast=6, slow=21).generate(close=close)
    assert res.start == 20


def test_rsi_threshold_signals_follow_windowed_rsi():
    close = _wave(50)
    res = RSIThresholdStrategy(period=14).generate(close=close)
    assert res.start == 14
    for i in range(14, 50):
        expected = classify_rsi(rsi_at(close[: i + 1], 14), oversold=30.0, overbought=70.0)
        assert res.at(i) == expected


def test_classify_rsi_bands():
    assert classify_rsi(25.0, oversold=30, overbought=70) is Signal.BUY
    assert classify_rsi(75.0, oversold=30, overbought=70) is Signal.SELL
    assert classify_rsi(50.0, oversold=30, overbought=70) is Signal.HOLD
    assert classify_rsi(None, oversold=30, overbought=70) is Signal.HOLD


def test_rsi_strategy_sells_a_relentless_rally():
    close = np.array([1.0 + 0.001 * i for i in range(20)])
    res = RSIThresholdStrategy().generate(close=close)
    assert set(res.signals) == {Signal.SELL}


def test_macd_strategy_offsets_by_slow_period_and_never_holds():
    close = _wave(80)
    res = MACDStrategy().generate(close=close)
    m = macd(close)
    assert res.start == 26
    assert Signal.HOLD not in res.signals
    for i in range(26, 80):
        assert res.at(i) == (Signal.BUY if m.macd_line[i] > m.signal_line[i] else Signal.SELL)


def test_short_series_yield_empty_results_not_errors():
    close = np.array([1.0, 1.1, 1.2])
    assert len(MACDStrategy().generate(close=close)) == 0
    assert len(MACrossoverStrategy().generate(close=close)) == 0
    assert len(RSIThresholdStrategy().generate(close=close)) == 0


def test_hybrid_short_series_is_all_hold():
    close = _wave(49)
    res = HybridStrategy().generate(close=close)
    assert res.start == 0
    assert len(res) == 49
    assert set(res.signals) == {Signal.HOLD}


def test_hybrid_buys_steady_uptrend_inside_bands():
    # Alternating up/down steps with an upward drift: above SMA-50, inside the bands.
    i = np.arange(80, dtype=np.float64)
    close = 1.0 + i * 0.0005 + np.where(i % 2 == 0, 0.0004, -0.0004)
    res = HybridStrategy().generate(close=close)
    assert res.at(79) is Signal.BUY


def test_hybrid_sells_a_crash_below_the_lower_band():
    close = np.concatenate([np.full(60, 1.10) + np.tile([0.0002, -0.0002], 30), [1.08]])
    res = HybridStrategy().generate(close=close)
    assert res.at(60) is Signal.SELL


def test_hybrid_readings_record_pullback_without_gating():
    close = np.linspace(1.2, 1.1, 70)
    strat = HybridStrategy()
    readings = strat.readings(close)
    last = readings[-1]
    assert last is not None
    assert last.in_pullback is True
    assert last.in_trend is False
    # A steady decline stays inside the bands: HOLD despite the pullback flag.
    assert last.overextended is False
    assert strat.generate(close=close).at(69) is Signal.HOLD


def test_result_alignment_by_trailing_offset():
    res = StrategyResult(signals=(Signal.BUY, Signal.SELL), start=3)
    assert res.at(2) is None
    assert res.at(3) is Signal.BUY
    assert res.at(5) is None
    assert res.aligned(5) == [Signal.HOLD, Signal.HOLD, Signal.HOLD, Signal.BUY, Signal.SELL]


def test_resolve_strategy_rejects_unknown():
    assert resolve_strategy("macd") is StrategyId.MACD
    with pytest.raises(UnknownStrategyError) as e:
        resolve_strategy("bollinger")
    assert e.value.name == "bollinger"


def test_resolve_strategy_or_default_falls_back_to_momentum():
    assert resolve_strategy_or_default("nope") is StrategyId.MOMENTUM
    assert resolve_strategy_or_default(None) is StrategyId.MOMENTUM
    assert resolve_strategy_or_default("RSI") is StrategyId.RSI


def test_build_strategy_uses_config_periods():
    cfg = StrategiesConfig.model_validate({"ma": {"fast": 6, "slow": 21}})
    strat = build_strategy(StrategyId.MA, cfg)
    assert isinstance(strat, MACrossoverStrategy)
    assert (strat.fast, strat.slow) == (6, 21)


def test_every_registered_strategy_builds_from_config():
    cfg = StrategiesConfig()
    for sid in registered():
        strat = build_strategy(sid, cfg)
        assert isinstance(strat, Strategy)
        assert strat.id is sid


def test_base_strategy_has_no_config_binding():
    with pytest.raises(NotImplementedError):
        Strategy.from_config(StrategiesConfig())
