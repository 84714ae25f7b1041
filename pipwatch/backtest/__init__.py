"""pipwatch.backtest

Indicator & signal engine plus the position simulation engine.

- indicators: pure window transforms with explicit ``None`` warm-up
- strategies: one evaluation rule per strategy id
- performance: compounded stats + best-strategy selection
- simulator: chronological long-only replay
"""
