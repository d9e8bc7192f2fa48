#!/usr/bin/env python3
"""
Compare every distribution strategy on one festival snapshot.

For each strategy, reports:
  - Total assignments
  - Min / max / spread of per-jury load
  - Juries left idle
  - Wall time

Strategies that cannot place every film are listed as FAILED with the
reason instead of aborting the comparison.

Usage:
    python3 compare.py festival.xlsx [-r 3] [-l 70]
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.table import Table

# Suppress INFO noise from the allocator library during batch comparison
logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

from jury_allocator.allocator import distribute
from jury_allocator.config import DEFAULT_MAX_PER_JURY, DEFAULT_MIN_RATINGS
from jury_allocator.errors import DistributionError
from jury_allocator.excel_io import read_snapshot
from jury_allocator.strategies import list_strategies

console = Console()


def run_all_strategies(snapshot, min_ratings: int, max_per_jury: int) -> dict[str, dict]:
    """Run each registered strategy and collect load metrics."""
    existing = snapshot.existing_ratings()
    results = {}

    for strat in list_strategies():
        t0 = time.monotonic()
        try:
            result = distribute(
                snapshot.films,
                snapshot.juries,
                min_ratings,
                max_per_jury,
                existing,
                strategy=strat,
            )
        except DistributionError as e:
            results[strat] = {"error": e.message, "elapsed": time.monotonic() - t0}
            continue

        stats = result.stats
        results[strat] = {
            "total": stats.total_assignments,
            "min": stats.min_per_jury,
            "max": stats.max_per_jury,
            "spread": stats.max_per_jury - stats.min_per_jury,
            "idle": sum(1 for load in stats.per_jury if load.film_count == 0),
            "elapsed": time.monotonic() - t0,
        }

    return results


def print_leaderboard(results: dict[str, dict], min_ratings: int, max_per_jury: int) -> None:
    """Best balance first (smallest spread, then smallest peak)."""
    table = Table(title=f"Strategy leaderboard - R={min_ratings}, Lmax={max_per_jury}")
    table.add_column("Strategy", style="cyan")
    table.add_column("Assignments", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Spread", justify="right", style="green")
    table.add_column("Idle", justify="right")
    table.add_column("Time", justify="right")

    ok = sorted(
        ((name, r) for name, r in results.items() if "error" not in r),
        key=lambda kv: (kv[1]["spread"], kv[1]["max"], kv[0]),
    )
    for name, r in ok:
        table.add_row(
            name,
            str(r["total"]),
            str(r["min"]),
            str(r["max"]),
            str(r["spread"]),
            str(r["idle"]),
            f"{r['elapsed']:.2f}s",
        )

    for name, r in sorted(results.items()):
        if "error" in r:
            table.add_row(name, "[red]FAILED[/]", "", "", "", "", f"{r['elapsed']:.2f}s")

    console.print(table)

    for name, r in sorted(results.items()):
        if "error" in r:
            console.print(f"[red]{name}:[/] {r['error']}")


def main():
    parser = argparse.ArgumentParser(description="Compare distribution strategies")
    parser.add_argument("workbook", type=Path, help="Festival snapshot XLSX")
    parser.add_argument("--min-ratings", "-r", type=int, default=DEFAULT_MIN_RATINGS)
    parser.add_argument("--max-per-jury", "-l", type=int, default=DEFAULT_MAX_PER_JURY)
    args = parser.parse_args()

    if not args.workbook.exists():
        console.print(f"[red]File not found: {args.workbook}[/]")
        sys.exit(1)

    snapshot = read_snapshot(args.workbook)
    console.print(
        f"Running {len(list_strategies())} strategies on "
        f"{len(snapshot.films)} films / {len(snapshot.juries)} juries..."
    )
    results = run_all_strategies(snapshot, args.min_ratings, args.max_per_jury)
    print_leaderboard(results, args.min_ratings, args.max_per_jury)


if __name__ == "__main__":
    main()
