"""pipwatch.backtest.io

Price series carrier + CSV loading.

CSV schema:
- required: timestamp (ISO-8601), and price or close
- rows may be in either order; they are sorted oldest-first

All prices must be numeric.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import numpy as np

from pipwatch.core.types import PricePoint


def parse_timestamp(ts: str) -> datetime:
    ts = ts.strip()
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    dt = datetime.fromisoformat(ts)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


@dataclass(frozen=True, slots=True)
class PriceSeries:
    """Chronologically ordered (oldest first) closes. Index is the time step."""

    timestamps: tuple[datetime, ...]
    close: np.ndarray  # float64, shape (T,)

    def __post_init__(self) -> None:
        if self.close.ndim != 1 or self.close.shape[0] != len(self.timestamps):
            raise ValueError("timestamps and close must have the same length")
        for prev, cur in zip(self.timestamps, self.timestamps[1:]):
            if cur <= prev:
                raise ValueError(f"timestamps must be strictly increasing ({prev} -> {cur})")

    def __len__(self) -> int:
        return len(self.timestamps)

    @classmethod
    def from_points(cls, points: Iterable[PricePoint], *, newest_first: bool = False) -> PriceSeries:
        pts = list(points)
        if newest_first:
            pts.reverse()
        return cls(
            timestamps=tuple(p.timestamp for p in pts),
            close=np.array([float(p.price) for p in pts], dtype=np.float64),
        )


def load_prices_csv(path: str | Path) -> PriceSeries:
    p = Path(path)
    rows: list[dict[str, str]] = []
    with p.open("r", encoding="utf-8") as f:
        r = csv.DictReader(f)
        for row in r:
            rows.append({k.strip(): (v.strip() if isinstance(v, str) else "") for k, v in row.items() if k is not None})

    if not rows:
        return PriceSeries(timestamps=(), close=np.zeros(0, dtype=np.float64))

    if "timestamp" not in rows[0]:
        raise ValueError("CSV missing required column: timestamp")
    price_col = "price" if "price" in rows[0] else "close" if "close" in rows[0] else None
    if price_col is None:
        raise ValueError("CSV missing required column: price (or close)")

    points = [PricePoint(timestamp=parse_timestamp(row["timestamp"]), price=float(row[price_col])) for row in rows]
    points.sort(key=lambda pt: pt.timestamp)
    return PriceSeries.from_points(points)
