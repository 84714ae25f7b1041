from __future__ import annotations

import pytest

from pipwatch import __version__
from pipwatch.market.quotes import SyntheticSource
from tests.unit._api_test_client import make_app, make_client


@pytest.mark.anyio
async def test_health_returns_version(test_config):
    app = make_app(test_config, SyntheticSource(seed=1))

    async with make_client(app) as ac:
        r = await ac.get("/api/v1/health")
        assert r.status_code == 200
        data = r.json()
        assert data["version"] == __version__
        assert data["uptime_seconds"] >= 0.0
