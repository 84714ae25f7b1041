from __future__ import annotations

import pytest

from pipwatch.backtest.performance import evaluate_performance
from pipwatch.market.quotes import SyntheticSource
from tests.unit._api_test_client import make_app, make_client


@pytest.mark.anyio
async def test_trades_stats_match_engine(test_config):
    source = SyntheticSource(n=100, seed=9)
    series = source.fetch()
    app = make_app(test_config, SyntheticSource(n=100, seed=9, now=series.timestamps[-1]))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/trades", params={"strategy": "RSI"})
        assert r.status_code == 200
        data = r.json()

    _, stats = evaluate_performance(series.close, "RSI", test_config.strategies)
    assert data["strategy"] == "RSI"
    assert data["stats"]["total_return"] == pytest.approx(stats.total_return)
    assert data["stats"]["win_rate"] == pytest.approx(stats.win_rate)


@pytest.mark.anyio
async def test_trades_default_and_unknown_use_momentum(test_config):
    app = make_app(test_config, SyntheticSource(seed=4))

    async with make_client(app) as ac:
        default = await ac.get("/api/v1/trades")
        unknown = await ac.get("/api/v1/trades", params={"strategy": "FIBONACCI"})

    assert default.status_code == 200
    assert unknown.status_code == 200
    assert default.json()["strategy"] == "MOMENTUM"
    assert unknown.json()["strategy"] == "MOMENTUM"
