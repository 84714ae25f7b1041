"""pipwatch.backtest.strategies

Strategy library. Importing this package registers every strategy id.
"""

from pipwatch.backtest.strategies.base import Strategy, StrategyResult
from pipwatch.backtest.strategies.hybrid import HybridReading, HybridStrategy
from pipwatch.backtest.strategies.ma_crossover import MACrossoverStrategy
from pipwatch.backtest.strategies.macd_cross import MACDStrategy
from pipwatch.backtest.strategies.momentum import MomentumStrategy
from pipwatch.backtest.strategies.registry import (
    DEFAULT_STRATEGY,
    build_strategy,
    registered,
    resolve_strategy,
    resolve_strategy_or_default,
)
from pipwatch.backtest.strategies.rsi_threshold import RSIThresholdStrategy, classify_rsi

__all__ = [
    "DEFAULT_STRATEGY",
    "HybridReading",
    "HybridStrategy",
    "MACDStrategy",
    "MACrossoverStrategy",
    "MomentumStrategy",
    "RSIThresholdStrategy",
    "Strategy",
    "StrategyResult",
    "build_strategy",
    "classify_rsi",
    "registered",
    "resolve_strategy",
    "resolve_strategy_or_default",
]
