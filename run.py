#!/usr/bin/env python3
"""
CLI entry point for jury distribution and film ranking.

Usage:
    python run.py distribute <festival.xlsx> [options]
    python run.py rank <festival.xlsx> [options]

distribute options:
    -r, --min-ratings R    Minimum ratings per film (default: JURY_MIN_RATINGS or 3)
    -l, --max-per-jury L   Maximum films per jury (default: JURY_MAX_PER_JURY or 70)
    --algorithm NAME       Distribution strategy (default: least-loaded)
    --preview              Compute and show stats only, write nothing
    --output FILE          Write assignments to FILE instead of the input workbook
    --tsv                  Print tab-delimited assignments instead of writing a workbook

rank options:
    --top N                Only show the N best films with enough ratings
    --min-count K          Minimum ratings for --top (default: 3)
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

console = Console()


def _distribute(args) -> None:
    from jury_allocator.allocator import distribute, preview_distribution, print_summary
    from jury_allocator.excel_io import format_output, read_snapshot, write_assignments
    from jury_allocator.feasibility import validate_request_parameters

    validate_request_parameters(args.min_ratings, args.max_per_jury)

    console.print(f"[bold]Loading festival snapshot from {args.workbook}...[/]")
    snapshot = read_snapshot(args.workbook)
    console.print(f"Found {len(snapshot.films)} films and {len(snapshot.juries)} juries")

    run_fn = preview_distribution if args.preview else distribute
    console.print(f"\n[bold]Running distribution...[/]")
    result = run_fn(
        snapshot.films,
        snapshot.juries,
        args.min_ratings,
        args.max_per_jury,
        snapshot.existing_ratings(),
        strategy=args.algorithm,
    )

    print_summary(result)

    if args.preview:
        console.print(f"\n[yellow]Preview only - nothing written.[/]")
        return

    if args.tsv:
        console.print(f"\n[bold]Tab-delimited assignments:[/]")
        console.print("-" * 60)
        console.print(format_output(result))
        console.print("-" * 60)
        return

    target = args.output or args.workbook
    write_assignments(target, result)
    console.print(f"\n[green]{len(result.assignments)} assignments written to {target}[/]")


def _rank(args) -> None:
    from jury_allocator.excel_io import read_snapshot
    from jury_allocator.ranker import aggregate_ratings, print_ranking, rank_films, top_rated

    snapshot = read_snapshot(args.workbook)
    rows = aggregate_ratings(snapshot.films, snapshot.ratings)

    if args.top:
        ranked = top_rated(rows, limit=args.top, min_count=args.min_count)
        print_ranking(ranked, title=f"Top {args.top} (min {args.min_count} ratings)")
    else:
        print_ranking(rank_films(rows))


def main():
    from jury_allocator.config import (
        DEFAULT_MAX_PER_JURY,
        DEFAULT_MIN_RATINGS,
        TOP_RATED_MIN_COUNT,
    )
    from jury_allocator.errors import DistributionError
    from jury_allocator.strategies import DEFAULT_STRATEGY, list_strategies

    parser = argparse.ArgumentParser(
        description="Jury distribution and film ranking tool",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distribute", help="Assign films to juries")
    dist.add_argument("workbook", type=Path, help="Festival snapshot XLSX")
    dist.add_argument("--min-ratings", "-r", type=int, default=DEFAULT_MIN_RATINGS)
    dist.add_argument("--max-per-jury", "-l", type=int, default=DEFAULT_MAX_PER_JURY)
    dist.add_argument(
        "--algorithm", default=DEFAULT_STRATEGY, choices=list_strategies(),
        help=f"Distribution algorithm (default: {DEFAULT_STRATEGY})",
    )
    dist.add_argument("--preview", action="store_true", help="Do not write anything")
    dist.add_argument("--output", type=Path, help="Write assignments to this workbook")
    dist.add_argument("--tsv", action="store_true", help="Print tab-delimited output")

    rank = sub.add_parser("rank", help="Rank films from jury ratings")
    rank.add_argument("workbook", type=Path, help="Festival snapshot XLSX")
    rank.add_argument("--top", type=int, default=None, help="Show only the N best films")
    rank.add_argument("--min-count", type=int, default=TOP_RATED_MIN_COUNT)

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.workbook.exists():
        console.print(f"[red]File not found: {args.workbook}[/]")
        sys.exit(1)

    try:
        if args.command == "distribute":
            _distribute(args)
        else:
            _rank(args)
    except (DistributionError, ValueError) as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
