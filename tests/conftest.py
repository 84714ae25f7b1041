from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pipwatch.backtest.io import PriceSeries  # noqa: E402
from pipwatch.core.config import Config  # noqa: E402
from tests.unit._series import make_series  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def test_config() -> Config:
    """Config loaded from the repo defaults (no user overlay)."""

    return Config.from_yaml(REPO_ROOT / "config" / "default.yaml")


@pytest.fixture()
def hourly_series() -> PriceSeries:
    """120 hourly closes: a sine wave around 0.92 with a slow drift."""

    i = np.arange(120, dtype=np.float64)
    return make_series(0.92 + np.sin(i / 10.0) * 0.01 + i * 0.00002)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
