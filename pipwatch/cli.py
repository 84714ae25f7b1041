"""pipwatch.cli

Command line interface entry point for pipwatch.

Design constraints:
- argparse-based.
- Lazy imports: do not import numpy/httpx at parse time.
- Every command prints JSON to stdout.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

STRATEGY_CHOICES = ["MACD", "RSI", "MA", "HYBRID", "MOMENTUM"]


@dataclass(frozen=True)
class CliContext:
    repo_root: Path


def _repo_root_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipwatch",
        description="Hourly FX trading signals and the P&L of following them.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    source = argparse.ArgumentParser(add_help=False)
    source.add_argument("--csv", type=Path, default=None, help="Read prices from a CSV file instead of the quote API.")
    source.add_argument("--synthetic", action="store_true", help="Use the synthetic series (no network).")
    source.add_argument("--seed", type=int, default=None, help="Seed for the synthetic series.")

    sub = parser.add_subparsers(dest="command")

    p_signals = sub.add_parser("signals", parents=[source], help="Signal-annotated trailing window")
    p_signals.add_argument("--strategy", default="MACD")
    p_signals.add_argument("--window", type=int, default=None)

    p_stats = sub.add_parser("stats", parents=[source], help="Performance stats (unknown strategy falls back to momentum)")
    p_stats.add_argument("--strategy", default="momentum")

    p_sim = sub.add_parser("simulate", parents=[source], help="Replay signals into trades")
    p_sim.add_argument("--strategy", action="append", choices=STRATEGY_CHOICES, default=None)
    p_sim.add_argument("--window", type=int, default=None)

    sub.add_parser("monitor", parents=[source], help="Pick the best strategy and alert on a new signal")

    p_api = sub.add_parser("api", help="Start FastAPI server")
    p_api.add_argument("--host", default=None)
    p_api.add_argument("--port", type=int, default=None)

    return parser


def _print_version() -> None:
    from pipwatch import __version__

    print(f"pipwatch v{__version__}")


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, indent=2, default=str))


def _load_config(ctx: CliContext):
    from pipwatch.core.config import Config
    from pipwatch.core.logging import configure_logging

    config = Config.load(ctx.repo_root)
    configure_logging(config.logging)
    return config


def _load_series(args: argparse.Namespace, config):
    from pipwatch.backtest.io import load_prices_csv
    from pipwatch.market.quotes import AlphaVantageSource, SyntheticSource, load_prices

    if args.csv is not None:
        return load_prices_csv(args.csv)
    if args.synthetic:
        return SyntheticSource(n=config.quotes.fallback_points, seed=args.seed).fetch()
    return load_prices(AlphaVantageSource(config.quotes), fallback_points=config.quotes.fallback_points, seed=args.seed)


def _cmd_signals(ctx: CliContext, args: argparse.Namespace) -> int:
    from pipwatch.backtest.engine import signal_point_dict, signal_series
    from pipwatch.core.exceptions import UnknownStrategyError

    config = _load_config(ctx)
    series = _load_series(args, config)
    window = args.window or config.api.signal_window
    try:
        points = signal_series(series, args.strategy, config, window=window)
    except UnknownStrategyError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    _print_json([signal_point_dict(p) for p in points])
    return 0


def _cmd_stats(ctx: CliContext, args: argparse.Namespace) -> int:
    from pipwatch.backtest.performance import evaluate_performance

    config = _load_config(ctx)
    series = _load_series(args, config)
    sid, stats = evaluate_performance(series.close, args.strategy, config.strategies)
    _print_json({"strategy": str(sid), "stats": stats.as_dict()})
    return 0


def _cmd_simulate(ctx: CliContext, args: argparse.Namespace) -> int:
    from pipwatch.backtest.engine import run_all

    config = _load_config(ctx)
    series = _load_series(args, config)
    strategies = args.strategy or ["MACD", "RSI", "MA", "HYBRID"]
    window = args.window or config.api.signal_window
    reports = run_all(series, strategies, config, window=window)
    _print_json({str(sid): rep.simulation.as_dict() for sid, rep in reports.items()})
    return 0


def _cmd_monitor(ctx: CliContext, args: argparse.Namespace) -> int:
    from pipwatch.backtest.monitor import run_monitor

    config = _load_config(ctx)
    series = _load_series(args, config)
    _print_json(run_monitor(series, config).as_dict())
    return 0


def _cmd_api(ctx: CliContext, args: argparse.Namespace) -> int:
    config = _load_config(ctx)

    host = args.host or config.api.host
    port = args.port or config.api.port

    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(repo_root=_repo_root_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "signals": _cmd_signals,
        "stats": _cmd_stats,
        "simulate": _cmd_simulate,
        "monitor": _cmd_monitor,
        "api": _cmd_api,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    return int(fn(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
