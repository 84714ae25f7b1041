from __future__ import annotations

import pytest

from pipwatch.market.quotes import SyntheticSource
from tests.unit._api_test_client import make_app, make_client


@pytest.mark.anyio
async def test_simulation_balance_tracks_trades(test_config):
    app = make_app(test_config, SyntheticSource(n=120, seed=8))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/simulation", params={"strategy": "MOMENTUM"})
        assert r.status_code == 200
        data = r.json()

    assert data["strategy"] == "MOMENTUM"
    assert data["position"] in ("FLAT", "LONG")
    assert (data["entry_price"] is None) == (data["position"] == "FLAT")
    profits = sum(t["profit"] for t in data["trades"])
    assert data["total_pnl"] == pytest.approx(profits)
    assert data["balance"] == pytest.approx(test_config.simulation.starting_balance + profits)


@pytest.mark.anyio
async def test_simulation_hybrid_short_window_does_nothing(test_config):
    app = make_app(test_config, SyntheticSource(n=30, seed=8))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/simulation", params={"strategy": "HYBRID"})
        data = r.json()

    assert data["trades"] == []
    assert data["balance"] == pytest.approx(10_000.0)
    assert data["position"] == "FLAT"
