"""pipwatch.core.config

Three config surfaces only:
1) `config/default.yaml` + `config/presets/*.yaml`
2) Environment variables (`PIPWATCH_` prefix, `__` for nesting)
3) Explicit overrides in code (`model_copy(update=...)`)

Everything else is derived.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from pipwatch.core.exceptions import ConfigError
from pipwatch.core.types import StrategyId


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


class QuotesConfig(BaseModel):
    """Quote provider settings. The provider itself sits outside the core."""

    base_url: str = "https://www.alphavantage.co/query"
    api_key: str = ""
    from_symbol: str = "EUR"
    to_symbol: str = "USD"
    interval: str = "60min"
    # Provider quotes EUR->USD; signals run on USD->EUR.
    invert: bool = True
    limit: int = Field(default=100, ge=1)
    timeout_s: float = 20.0
    fallback_points: int = Field(default=100, ge=1)


class MAConfig(BaseModel):
    fast: int = Field(default=5, ge=1)
    slow: int = Field(default=20, ge=2)

    @model_validator(mode="after")
    def fast_below_slow(self) -> MAConfig:
        if self.fast >= self.slow:
            raise ValueError(f"MA fast period must be below slow period, got {self.fast}/{self.slow}")
        return self


class RSIConfig(BaseModel):
    period: int = Field(default=14, ge=1)
    oversold: float = 30.0
    overbought: float = 70.0


class MACDConfig(BaseModel):
    fast: int = Field(default=12, ge=1)
    slow: int = Field(default=26, ge=2)
    signal: int = Field(default=9, ge=1)


class HybridConfig(BaseModel):
    sma_period: int = Field(default=50, ge=1)
    rsi_period: int = Field(default=14, ge=1)
    bb_period: int = Field(default=20, ge=1)
    bb_multiplier: float = 2.0
    pullback_rsi: float = 40.0


class StrategiesConfig(BaseModel):
    ma: MAConfig = Field(default_factory=MAConfig)
    rsi: RSIConfig = Field(default_factory=RSIConfig)
    macd: MACDConfig = Field(default_factory=MACDConfig)
    hybrid: HybridConfig = Field(default_factory=HybridConfig)


class SimulationConfig(BaseModel):
    starting_balance: float = 10_000.0
    pip_size: float = 0.0001
    pip_value: float = 1.0  # $ per pip

    @field_validator("pip_size")
    @classmethod
    def pip_size_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("pip_size must be > 0")
        return v


class MonitorConfig(BaseModel):
    candidates: list[StrategyId] = [StrategyId.MACD, StrategyId.RSI, StrategyId.MA]
    window: int = Field(default=30, ge=2)
    alert_url: str = ""
    alert_to: str = ""
    timeout_s: float = 10.0


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class ApiConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000
    signal_window: int = Field(default=30, ge=1)


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    config_dir: Path = Path("config")

    preset: Literal["standard", "swing", "custom"] = "standard"

    quotes: QuotesConfig = Field(default_factory=QuotesConfig)
    strategies: StrategiesConfig = Field(default_factory=StrategiesConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    model_config = {"env_prefix": "PIPWATCH_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        try:
            raw = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file is not valid YAML: {path}") from e

        preset_name = raw.get("preset", "standard")
        preset_path = path.parent / "presets" / f"{preset_name}.yaml"
        if preset_path.exists():
            preset_data = yaml.safe_load(preset_path.read_text()) or {}
            raw = _deep_merge(preset_data, raw)

        raw.setdefault("config_dir", path.parent)
        return cls(**raw)

    @classmethod
    def from_repo_defaults(cls, repo_root: Path | None = None) -> Config:
        root = repo_root or Path.cwd()
        return cls.from_yaml(root / "config" / "default.yaml")

    @classmethod
    def load(cls, repo_root: Path | None = None) -> Config:
        """`config/user.yaml` if present, else repo defaults, else built-in defaults."""

        root = repo_root or Path.cwd()
        user_path = root / "config" / "user.yaml"
        if user_path.exists():
            return cls.from_yaml(user_path)
        if (root / "config" / "default.yaml").exists():
            return cls.from_repo_defaults(root)
        return cls()
