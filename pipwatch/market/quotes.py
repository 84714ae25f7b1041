"""pipwatch.market.quotes

Price sources.

The core never talks to the network directly: it takes a ``PriceSource``.
Any source failure surfaces as UpstreamUnavailableError, and ``load_prices``
swaps in the synthetic series so downstream math always has input.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol, runtime_checkable

import httpx
import numpy as np

from pipwatch.backtest.io import PriceSeries, parse_timestamp
from pipwatch.core.config import QuotesConfig
from pipwatch.core.exceptions import UpstreamUnavailableError
from pipwatch.core.types import PricePoint

logger = logging.getLogger(__name__)

CLOSE_FIELD = "4. close"


@runtime_checkable
class PriceSource(Protocol):
    name: str

    def fetch(self) -> PriceSeries: ...


def series_key(interval: str) -> str:
    return f"Time Series FX ({interval})"


def parse_fx_intraday(data: Any, *, interval: str = "60min", limit: int = 100, invert: bool = True) -> PriceSeries:
    """Turn an FX_INTRADAY payload into a chronological series.

    The provider lists bars newest first; the newest ``limit`` are kept and
    reversed.
    """

    if not isinstance(data, dict):
        raise UpstreamUnavailableError("quote payload is not an object")

    ts_map = data.get(series_key(interval))
    if not isinstance(ts_map, dict) or not ts_map:
        # Rate-limit and bad-key responses come back 200 with a "Note" or "Error Message".
        reason = data.get("Note") or data.get("Information") or data.get("Error Message") or "missing time series"
        raise UpstreamUnavailableError(f"quote payload unusable: {reason}")

    points: list[PricePoint] = []
    try:
        for ts, values in list(ts_map.items())[:limit]:
            close = float(values[CLOSE_FIELD])
            price = 1.0 / close if invert else close
            points.append(PricePoint(timestamp=parse_timestamp(ts), price=price))
    except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
        raise UpstreamUnavailableError(f"quote payload malformed: {e}") from e

    points.sort(key=lambda p: p.timestamp)
    try:
        return PriceSeries.from_points(points)
    except ValueError as e:
        raise UpstreamUnavailableError(f"quote payload malformed: {e}") from e


@dataclass
class AlphaVantageSource:
    cfg: QuotesConfig
    client: httpx.Client | None = None
    name: str = "alphavantage"

    def params(self) -> dict[str, str]:
        return {
            "function": "FX_INTRADAY",
            "from_symbol": self.cfg.from_symbol,
            "to_symbol": self.cfg.to_symbol,
            "interval": self.cfg.interval,
            "apikey": self.cfg.api_key,
        }

    def fetch(self) -> PriceSeries:
        if not self.cfg.api_key:
            raise UpstreamUnavailableError("quotes.api_key is not set")

        client = self.client or httpx.Client(timeout=self.cfg.timeout_s)
        try:
            resp = client.get(self.cfg.base_url, params=self.params())
            resp.raise_for_status()
            data: Any = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailableError(f"quote request failed: {type(e).__name__}: {e}") from e
        finally:
            if self.client is None:
                client.close()

        return parse_fx_intraday(data, interval=self.cfg.interval, limit=self.cfg.limit, invert=self.cfg.invert)


def synthetic_series(
    n: int = 100,
    *,
    now: datetime | None = None,
    seed: int | None = None,
) -> PriceSeries:
    """Hourly stand-in series: 0.92 + sin(i/10) * 0.01 + U(0, 0.005)."""

    end = (now or datetime.now(tz=UTC)).replace(minute=0, second=0, microsecond=0)
    rng = np.random.default_rng(seed)
    noise = rng.uniform(0.0, 0.005, size=n)

    timestamps = tuple(end - timedelta(hours=(n - 1 - i)) for i in range(n))
    close = np.array([0.92 + math.sin(i / 10) * 0.01 + float(noise[i]) for i in range(n)], dtype=np.float64)
    return PriceSeries(timestamps=timestamps, close=close)


@dataclass
class SyntheticSource:
    n: int = 100
    seed: int | None = None
    now: datetime | None = None
    name: str = "synthetic"

    def fetch(self) -> PriceSeries:
        return synthetic_series(self.n, now=self.now, seed=self.seed)


def load_prices(source: PriceSource, *, fallback_points: int = 100, seed: int | None = None) -> PriceSeries:
    """Fetch from ``source``; on upstream failure return the synthetic series."""

    try:
        series = source.fetch()
    except UpstreamUnavailableError as e:
        logger.warning("upstream_unavailable", extra={"source": source.name, "reason": str(e)})
        return synthetic_series(fallback_points, seed=seed)

    if len(series) == 0:
        logger.warning("upstream_empty", extra={"source": source.name})
        return synthetic_series(fallback_points, seed=seed)
    return series
