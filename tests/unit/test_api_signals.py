from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pipwatch.core.exceptions import UpstreamUnavailableError
from pipwatch.market.quotes import SyntheticSource
from tests.unit._api_test_client import make_app, make_client

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


class DownSource:
    name = "down"

    def fetch(self):
        raise UpstreamUnavailableError("boom")


@pytest.mark.anyio
async def test_signals_newest_first_window(test_config):
    app = make_app(test_config, SyntheticSource(n=120, seed=5, now=NOW))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/signals", params={"strategy": "MACD"})
        assert r.status_code == 200
        rows = r.json()

    assert len(rows) == test_config.api.signal_window
    ts = [row["timestamp"] for row in rows]
    assert ts == sorted(ts, reverse=True)
    assert rows[0]["timestamp"].startswith("2025-03-10T12:00:00")
    # MACD is fully warmed up over the trailing window of 120 bars.
    assert all(row["signal"] in (-1, 1) for row in rows)


@pytest.mark.anyio
async def test_signals_window_and_lowercase_strategy(test_config):
    app = make_app(test_config, SyntheticSource(n=60, seed=5, now=NOW))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/signals", params={"strategy": "ma", "window": 5})
        assert r.status_code == 200
        assert len(r.json()) == 5


@pytest.mark.anyio
async def test_signals_fall_back_to_synthetic_when_upstream_down(test_config):
    app = make_app(test_config, DownSource())

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/signals", params={"strategy": "RSI"})
        assert r.status_code == 200
        rows = r.json()

    assert len(rows) == test_config.api.signal_window
    assert all(0.90 < row["price"] < 0.94 for row in rows)
