"""pipwatch.backtest.strategies.registry

Closed strategy registry.

Each ``StrategyId`` is bound to exactly one strategy class through
``@register``. Callers resolve the id once and dispatch through the table.

Two resolution contracts exist on purpose:
- ``resolve_strategy``: signal boundary, unknown ids raise UnknownStrategyError
- ``resolve_strategy_or_default``: scoring boundary, unknown ids fall back to
  MOMENTUM
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pipwatch.backtest.strategies.base import Strategy
from pipwatch.core.config import StrategiesConfig
from pipwatch.core.exceptions import UnknownStrategyError
from pipwatch.core.types import StrategyId

logger = logging.getLogger(__name__)

_REGISTRY: dict[StrategyId, type[Strategy]] = {}

DEFAULT_STRATEGY = StrategyId.MOMENTUM


def register(strategy_id: StrategyId) -> Callable[[type[Any]], type[Any]]:
    def _decorator(cls: type[Any]) -> type[Any]:
        if strategy_id in _REGISTRY and _REGISTRY[strategy_id] is not cls:
            raise ValueError(f"strategy already registered: {strategy_id}")
        _REGISTRY[strategy_id] = cls
        return cls

    return _decorator


def registered() -> list[StrategyId]:
    return [sid for sid in StrategyId if sid in _REGISTRY]


def resolve_strategy(name: str | StrategyId) -> StrategyId:
    try:
        return StrategyId(str(name).strip().upper())
    except ValueError:
        raise UnknownStrategyError(str(name)) from None


def resolve_strategy_or_default(name: str | StrategyId | None) -> StrategyId:
    if name is None:
        return DEFAULT_STRATEGY
    try:
        return resolve_strategy(name)
    except UnknownStrategyError:
        logger.info("strategy_defaulted", extra={"requested": str(name), "strategy": str(DEFAULT_STRATEGY)})
        return DEFAULT_STRATEGY


def build_strategy(strategy_id: StrategyId, cfg: StrategiesConfig | None = None) -> Strategy:
    cfg = cfg or StrategiesConfig()
    cls = _REGISTRY.get(strategy_id)
    if cls is None:
        raise UnknownStrategyError(str(strategy_id))
    return cls.from_config(cfg)
