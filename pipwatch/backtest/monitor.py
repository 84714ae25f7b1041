"""pipwatch.backtest.monitor

Strategy monitor.

One pass:
1) score every candidate strategy, pick the best total_return
2) annotate the latest window with the best strategy's signals
3) compare the latest signal to the previous one
4) alert when a new BUY/SELL appears

Delivery is best-effort: a failing sink reports False and never aborts the
pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

import httpx

from pipwatch.backtest.engine import signal_series
from pipwatch.backtest.io import PriceSeries
from pipwatch.backtest.performance import evaluate_performance, score_candidates, select_best
from pipwatch.core.config import Config, MonitorConfig
from pipwatch.core.types import Signal, StrategyId

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Alert:
    strategy: StrategyId
    signal: Signal
    price: float
    ts: datetime
    to: str = ""

    @property
    def subject(self) -> str:
        return f"Trading Signal Alert - {self.strategy} {self.signal.label}"

    def payload(self) -> dict[str, Any]:
        return {
            "to": self.to,
            "subject": self.subject,
            "strategy": str(self.strategy),
            "price": f"{self.price:.4f}",
            "signal": int(self.signal),
            "ts": self.ts.isoformat(),
        }


@runtime_checkable
class AlertSink(Protocol):
    def send(self, alert: Alert) -> bool: ...


class LoggingAlertSink:
    def send(self, alert: Alert) -> bool:
        logger.info("alert_sent", extra={"subject": alert.subject, "price": alert.price})
        return True


class WebhookAlertSink:
    """POSTs the alert as JSON to an external delivery endpoint (e.g. a mailer)."""

    def __init__(self, url: str, *, timeout_s: float = 10.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._client = client

    def send(self, alert: Alert) -> bool:
        client = self._client or httpx.Client(timeout=self.timeout_s)
        try:
            resp = client.post(self.url, json=alert.payload())
            resp.raise_for_status()
            return True
        except httpx.HTTPError:
            logger.exception("alert_delivery_failed", extra={"url": self.url, "strategy": str(alert.strategy)})
            return False
        finally:
            if self._client is None:
                client.close()


def sink_from_config(cfg: MonitorConfig) -> AlertSink:
    if cfg.alert_url:
        return WebhookAlertSink(cfg.alert_url, timeout_s=cfg.timeout_s)
    return LoggingAlertSink()


@dataclass(frozen=True, slots=True)
class MonitorResult:
    best_strategy: StrategyId
    performances: dict[StrategyId, float]
    latest_signal: Signal | None
    previous_signal: Signal | None
    signal_changed: bool
    alert_sent: bool
    ts: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def as_dict(self) -> dict[str, Any]:
        return {
            "best_strategy": str(self.best_strategy),
            "performances": {str(k): v for k, v in self.performances.items()},
            "latest_signal": None if self.latest_signal is None else int(self.latest_signal),
            "previous_signal": None if self.previous_signal is None else int(self.previous_signal),
            "signal_changed": self.signal_changed,
            "alert_sent": self.alert_sent,
            "timestamp": self.ts.isoformat(),
        }


def run_monitor(series: PriceSeries, cfg: Config | None = None, *, sink: AlertSink | None = None) -> MonitorResult:
    cfg = cfg or Config()
    sink = sink or sink_from_config(cfg.monitor)
    candidates = list(cfg.monitor.candidates)

    def _score(sid: StrategyId) -> float:
        return evaluate_performance(series.close, sid, cfg.strategies)[1].total_return

    performances = score_candidates(_score, candidates)
    best = select_best(performances, candidates)

    points = signal_series(series, best, cfg, window=cfg.monitor.window)
    latest = points[-1] if points else None
    previous = points[-2] if len(points) >= 2 else None

    latest_sig = latest.signal if latest else None
    previous_sig = previous.signal if previous else None
    changed = latest_sig is not None and latest_sig != previous_sig and latest_sig is not Signal.HOLD

    sent = False
    if changed and latest is not None:
        alert = Alert(strategy=best, signal=latest.signal, price=latest.price, ts=latest.timestamp, to=cfg.monitor.alert_to)
        sent = sink.send(alert)

    logger.info(
        "monitor_pass",
        extra={"best_strategy": str(best), "signal_changed": changed, "alert_sent": sent},
    )
    return MonitorResult(
        best_strategy=best,
        performances=performances,
        latest_signal=latest_sig,
        previous_signal=previous_sig,
        signal_changed=changed,
        alert_sent=sent,
    )
