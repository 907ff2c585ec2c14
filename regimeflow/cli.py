"""
regimeflow command line.

Commands:
  replay   Run a strategy over CSV bars and print the fired edges
  list     List registered strategies and smoothing methods

Examples:
  regimeflow list
  regimeflow replay --csv BTCUSDT.csv --config configs/regime_ma.yml
  regimeflow replay --csv BTCUSDT.csv --strategy fourier_scalper
  regimeflow replay --csv BTCUSDT.csv --csv ETHUSDT.csv --config configs/regime_ma.yml --workers 2
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_config, load_strategy_config
from .engine import EdgeKind, RecordingExecution, SignalEngine, load_bars_csv, run_symbols_parallel
from .indicators import list_smoothers
from .strategies import create_strategy, get_strategy_info, list_strategies
from .utils.logger import setup_logger


console = Console()


def setup_argparse(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="regimeflow",
        description="regimeflow - incremental regime and signal engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1],
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="WARNING only")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="DEBUG, including regime transitions")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    replay_parser = subparsers.add_parser("replay", help="Replay CSV bars through a strategy")
    replay_parser.add_argument(
        "--csv", action="append", required=True, dest="csv_paths",
        help="OHLCV CSV file (repeat for several symbols)",
    )
    replay_parser.add_argument("--config", help="Strategy YAML (strategy + params)")
    replay_parser.add_argument("--strategy", help="Strategy name (overrides the YAML)")
    replay_parser.add_argument("--symbol", help="Symbol for a single CSV (default: file stem)")
    replay_parser.add_argument("--workers", type=int, help="Processes for multi-symbol replay")

    subparsers.add_parser("list", help="List strategies and smoothers")

    return parser.parse_args(argv)


def _resolve_strategy(args: argparse.Namespace) -> tuple[str, dict]:
    name = None
    params: dict = {}
    if args.config:
        cfg = load_strategy_config(args.config)
        name, params = cfg.strategy, dict(cfg.params)
    if args.strategy:
        if name is not None and args.strategy != name:
            params = {}
        name = args.strategy
    if name is None:
        raise ValueError(
            "No strategy selected\n"
            "\n"
            "Fix: pass --config strategy.yml or --strategy NAME (see 'regimeflow list')"
        )
    return name, params


def handle_list() -> int:
    table = Table(title="Strategies")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in list_strategies():
        table.add_row(name, get_strategy_info(name)["description"])
    console.print(table)
    console.print(f"[bold]Smoothers:[/] {', '.join(list_smoothers())}")
    return 0


def _edge_table(symbol: str, rows: list[dict]) -> Table:
    table = Table(title=f"{symbol} edges")
    table.add_column("Bar", justify="right")
    table.add_column("Timestamp")
    table.add_column("Edge")
    table.add_column("Close", justify="right")
    for row in rows:
        color = "green" if row["kind"] == EdgeKind.ENTRY.value else "red"
        table.add_row(
            str(row["bar_index"]),
            str(row["timestamp"]),
            f"[{color}]{row['kind']} {row['side']}[/]",
            f"{row['price']:.4f}",
        )
    return table


def handle_replay(args: argparse.Namespace) -> int:
    name, params = _resolve_strategy(args)
    paths = [Path(p) for p in args.csv_paths]

    if len(paths) == 1:
        symbol = args.symbol or paths[0].stem
        bars = load_bars_csv(paths[0])
        execution = RecordingExecution()
        engine = SignalEngine(symbol, create_strategy(name, params), execution)
        engine.run(bars)
        rows = []
        for output in execution.outputs.get(symbol, []):
            for edge in output.edges:
                rows.append({
                    "kind": edge.kind.value,
                    "side": edge.side.value,
                    "bar_index": edge.bar_index,
                    "timestamp": output.timestamp,
                    "price": bars[edge.bar_index].close,
                })
        console.print(_edge_table(symbol, rows))
        console.print(f"[bold]{symbol}[/] | strategy={name} | bars={engine.bars_processed} | edges={len(rows)}")
        return 0

    streams = {p.stem: load_bars_csv(p) for p in paths}
    workers = args.workers or get_config().runtime.max_workers
    results = run_symbols_parallel(streams, name, params, max_workers=workers)
    failed = 0
    for result in results:
        if not result.success:
            failed += 1
            console.print(f"[red]{result.symbol} FAILED:[/] {escape(result.error or '')}")
            continue
        console.print(_edge_table(result.symbol, result.edges))
        console.print(
            f"[bold]{result.symbol}[/] | strategy={name} | bars={result.bars} | "
            f"edges={len(result.edges)} | {result.duration_seconds:.2f}s"
        )
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    args = setup_argparse(argv)
    config = get_config()

    level = config.log.level
    if args.quiet:
        level = "WARNING"
    elif args.verbose:
        level = "DEBUG"
    logger = setup_logger(config.log.log_dir, level)
    logger.debug(f"[CONFIG] {config.summary_short()}")

    try:
        if args.command == "list":
            return handle_list()
        if args.command == "replay":
            return handle_replay(args)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 2

    console.print("usage: regimeflow {replay,list} ... (see regimeflow --help)")
    return 1


if __name__ == "__main__":
    sys.exit(main())
