"""pipwatch.backtest.indicators

Pure, stateless indicator transforms.

Warm-up convention: an index without enough history is ``None``. Never 0,
never NaN. Downstream code must check ``is None`` before comparing.

EMA (and therefore MACD) is the exception: it is seeded with the first price
and is defined at every index.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

Series = list[float | None]


def _as_array(x: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(x, dtype=np.float64)


def _windows(x: np.ndarray, n: int) -> np.ndarray:
    """Trailing windows of length n; row k ends at index k + n - 1."""
    return np.lib.stride_tricks.sliding_window_view(x, n)


def sma(prices: Sequence[float] | np.ndarray, period: int) -> Series:
    x = _as_array(prices)
    out: Series = [None] * x.size
    if period <= 0 or x.size < period:
        return out

    csum = np.cumsum(x, dtype=np.float64)
    # rolling sum for windows ending at i (inclusive): sum[x[i-n+1:i+1]]
    roll_sum = csum[period - 1 :].copy()
    roll_sum[1:] = roll_sum[1:] - csum[:-period]
    for k, v in enumerate(roll_sum / float(period)):
        out[period - 1 + k] = float(v)
    return out


def rolling_std(prices: Sequence[float] | np.ndarray, period: int) -> Series:
    """Population standard deviation over the trailing window."""

    x = _as_array(prices)
    out: Series = [None] * x.size
    if period <= 0 or x.size < period:
        return out

    sd = np.std(_windows(x, period), axis=1, ddof=0)
    for k, v in enumerate(sd):
        out[period - 1 + k] = float(v)
    return out


def ema(prices: Sequence[float] | np.ndarray, period: int) -> list[float]:
    x = _as_array(prices)
    if x.size == 0:
        return []

    alpha = 2.0 / (period + 1)
    out = [float(x[0])]
    for v in x[1:]:
        out.append(float(v) * alpha + out[-1] * (1.0 - alpha))
    return out


@dataclass(frozen=True, slots=True)
class MACDResult:
    macd_line: list[float]
    signal_line: list[float]


def macd(prices: Sequence[float] | np.ndarray, fast: int = 12, slow: int = 26, signal: int = 9) -> MACDResult:
    fast_ema = ema(prices, fast)
    slow_ema = ema(prices, slow)
    line = [f - s for f, s in zip(fast_ema, slow_ema)]
    return MACDResult(macd_line=line, signal_line=ema(line, signal))


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # Zero average loss saturates instead of dividing by zero.
    if avg_loss == 0.0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi_at(prices: Sequence[float] | np.ndarray, period: int = 14) -> float | None:
    """Windowed RSI at the last point of ``prices``.

    Uses exactly the last ``period`` deltas. Callers evaluating a whole series
    re-slice the input per point.
    """

    x = _as_array(prices)
    if period <= 0 or x.size < period + 1:
        return None

    diff = np.diff(x[-(period + 1) :])
    avg_gain = float(np.mean(np.maximum(diff, 0.0)))
    avg_loss = float(np.mean(np.maximum(-diff, 0.0)))
    return _rsi_from_averages(avg_gain, avg_loss)


def rsi(prices: Sequence[float] | np.ndarray, period: int = 14) -> Series:
    """Running RSI over the full series.

    Index 0 and indices 1..period-1 are ``None``. From ``period`` on, gains
    and losses are averaged over the trailing ``period`` deltas ending at i.
    """

    x = _as_array(prices)
    out: Series = [None] * x.size
    if period <= 0 or x.size < period + 1:
        return out

    diff = np.diff(x)
    gains = _windows(np.maximum(diff, 0.0), period).mean(axis=1)
    losses = _windows(np.maximum(-diff, 0.0), period).mean(axis=1)
    # window k covers deltas k..k+period-1, i.e. ends at price index k+period
    for k, (g, lo) in enumerate(zip(gains, losses)):
        out[k + period] = _rsi_from_averages(float(g), float(lo))
    return out


@dataclass(frozen=True, slots=True)
class BollingerBands:
    middle: Series
    upper: Series
    lower: Series


def bollinger(prices: Sequence[float] | np.ndarray, period: int = 20, multiplier: float = 2.0) -> BollingerBands:
    center = sma(prices, period)
    sd = rolling_std(prices, period)

    upper: Series = []
    lower: Series = []
    for c, s in zip(center, sd):
        if c is None or s is None:
            upper.append(None)
            lower.append(None)
            continue
        upper.append(c + multiplier * s)
        lower.append(c - multiplier * s)
    return BollingerBands(middle=center, upper=upper, lower=lower)
