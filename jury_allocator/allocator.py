"""
Main distribution orchestrator.

Shared infrastructure (validation, feasibility, plan building, post-checks,
stats, summary) lives here. The film-spreading strategy is pluggable, see
jury_allocator/strategies/.

Everything is a pure computation over caller-supplied snapshots: nothing is
persisted and no input collection is mutated. Persisting the result (e.g.
replacing the previous assignment table wholesale) is the caller's job.
"""

import logging
from typing import Hashable, Iterable, Sequence

from jury_allocator.errors import NoEligibleJuryError
from jury_allocator.feasibility import (
    ExistingRatings,
    check_feasibility,
    rated_by,
    validate_parameters,
    validate_roster,
)
from jury_allocator.models import (
    Assignment,
    DistributionPlan,
    DistributionResult,
    DistributionStats,
    Film,
    JuryLoad,
    JuryMember,
    JuryProgress,
)
from jury_allocator.rounding import round_half_up
from jury_allocator.strategies import DEFAULT_STRATEGY, get_strategy

logger = logging.getLogger(__name__)


def build_stats(assignments: Sequence[Assignment], juries: Sequence[JuryMember]) -> DistributionStats:
    """
    Derive load statistics from an assignment batch.

    Every jury in the roster appears in per_jury (ascending id), including
    those with no assignment. The average is rounded half-up to one decimal.
    """
    sorted_juries = sorted(juries, key=lambda j: j.id)
    counts: dict[Hashable, int] = {jury.id: 0 for jury in sorted_juries}
    for assignment in assignments:
        if assignment.jury_id in counts:
            counts[assignment.jury_id] += 1

    loads = list(counts.values())
    total = len(assignments)

    return DistributionStats(
        total_assignments=total,
        jury_count=len(sorted_juries),
        min_per_jury=min(loads) if loads else 0,
        max_per_jury=max(loads) if loads else 0,
        avg_per_jury=round_half_up(total, len(loads)) if loads else 0,
        per_jury=[
            JuryLoad(jury_id=j.id, jury_name=j.display_name, film_count=counts[j.id])
            for j in sorted_juries
        ],
    )


def build_plan(
    films: Sequence[Film],
    juries: Sequence[JuryMember],
    min_ratings: int,
    max_per_jury: int,
    existing_ratings: ExistingRatings,
    needs: dict[Hashable, int],
) -> DistributionPlan:
    """Snapshot inputs into a fresh, sorted working plan."""
    sorted_films = sorted(films, key=lambda f: f.id)
    return DistributionPlan(
        films=sorted_films,
        juries=sorted(juries, key=lambda j: j.id),
        needs=dict(needs),
        existing={f.id: rated_by(existing_ratings, f.id) for f in sorted_films},
        min_ratings=min_ratings,
        max_per_jury=max_per_jury,
    )


def _verify_plan(plan: DistributionPlan) -> None:
    """Post-conditions every strategy must meet: exact coverage, Lmax, no dupes."""
    seen: set[Assignment] = set()
    for assignment in plan.assignments:
        if assignment in seen or assignment.jury_id in plan.already_rated(assignment.film_id):
            raise NoEligibleJuryError(assignment.film_id)
        seen.add(assignment)

    for film_id, need in plan.needs.items():
        if plan.assigned_count(film_id) != need:
            raise NoEligibleJuryError(film_id)

    for jury_id, load in plan.loads.items():
        if load > plan.max_per_jury:
            raise NoEligibleJuryError(
                next(a.film_id for a in reversed(plan.assignments) if a.jury_id == jury_id)
            )


def distribute(
    films: Sequence[Film],
    juries: Sequence[JuryMember],
    min_ratings: int,
    max_per_jury: int,
    existing_ratings: ExistingRatings | None = None,
    strategy: str = DEFAULT_STRATEGY,
) -> DistributionResult:
    """
    Compute the missing (film, jury) assignments.

    Args:
        films: Films eligible for coverage (filtering is the caller's job)
        juries: Jury members eligible for assignment
        min_ratings: R, minimum number of ratings per film
        max_per_jury: Lmax, maximum new assignments per jury
        existing_ratings: film_id -> jury ids that already rated the film
        strategy: Name of the distribution strategy (default: least-loaded)

    Returns:
        DistributionResult with new assignments only, plus load stats

    Raises:
        InvalidParameterError, InfeasibleCapacityError,
        InsufficientJuriesError, NoEligibleJuryError. Never partial output.
    """
    if existing_ratings is None:
        existing_ratings = {}

    validate_parameters(min_ratings, max_per_jury)
    validate_roster(films, juries)
    strategy_fn = get_strategy(strategy)

    if not films:
        logger.info("No films to distribute")
        return DistributionResult(
            assignments=[],
            stats=build_stats([], juries),
            strategy=strategy,
            min_ratings=min_ratings,
            max_per_jury=max_per_jury,
            max_capacity=len(juries) * max_per_jury,
        )

    report = check_feasibility(films, juries, min_ratings, max_per_jury, existing_ratings)
    plan = build_plan(films, juries, min_ratings, max_per_jury, existing_ratings, report.needs)

    logger.info(
        f"Distributing {len(films)} films ({len(plan.needs)} needing coverage) "
        f"across {len(plan.juries)} juries, R={min_ratings}, Lmax={max_per_jury}"
    )
    logger.info(f"Running strategy: {strategy}")
    strategy_fn(plan)
    _verify_plan(plan)

    assignments = list(plan.assignments)
    return DistributionResult(
        assignments=assignments,
        stats=build_stats(assignments, plan.juries),
        strategy=strategy,
        min_ratings=min_ratings,
        max_per_jury=max_per_jury,
        total_needed=report.total_needed,
        max_capacity=report.max_capacity,
    )


def preview_distribution(
    films: Sequence[Film],
    juries: Sequence[JuryMember],
    min_ratings: int,
    max_per_jury: int,
    existing_ratings: ExistingRatings | None = None,
    strategy: str = DEFAULT_STRATEGY,
) -> DistributionResult:
    """Same computation as distribute(); the caller simply does not persist it."""
    return distribute(films, juries, min_ratings, max_per_jury, existing_ratings, strategy)


def jury_progress(
    juries: Sequence[JuryMember],
    assignments: Iterable[Assignment],
    existing_ratings: ExistingRatings,
) -> list[JuryProgress]:
    """Per-jury assigned/rated counts for an applied assignment list."""
    progress = {
        jury.id: JuryProgress(jury_id=jury.id, jury_name=jury.display_name, assigned=0, rated=0)
        for jury in sorted(juries, key=lambda j: j.id)
    }
    for assignment in assignments:
        entry = progress.get(assignment.jury_id)
        if entry is None:
            continue
        entry.assigned += 1
        if assignment.jury_id in rated_by(existing_ratings, assignment.film_id):
            entry.rated += 1
    return list(progress.values())


def print_summary(result: DistributionResult) -> None:
    """Print a human-readable summary of the distribution."""
    from rich.console import Console
    from rich.table import Table

    console = Console()

    table = Table(
        title=f"Distribution Summary - R={result.min_ratings}, Lmax={result.max_per_jury} ({result.strategy})"
    )
    table.add_column("Jury", style="cyan")
    table.add_column("ID", justify="right")
    table.add_column("Films", justify="right", style="green")
    table.add_column("Free", justify="right")

    for load in result.stats.per_jury:
        free = result.max_per_jury - load.film_count
        free_style = "green" if free > 0 else "yellow"
        table.add_row(
            load.jury_name,
            str(load.jury_id),
            str(load.film_count),
            f"[{free_style}]{free}[/]",
        )

    console.print(table)

    stats = result.stats
    console.print(
        f"\n[bold]{stats.total_assignments}[/] assignments "
        f"({result.total_needed} needed, capacity {result.max_capacity}) - "
        f"min {stats.min_per_jury}, max {stats.max_per_jury}, avg {stats.avg_per_jury}"
    )

    over = [load for load in stats.per_jury if load.film_count > result.max_per_jury]
    if over:
        console.print(f"\n[red bold]CONSTRAINT VIOLATIONS:[/]")
        for load in over:
            console.print(f"[red]  {load.jury_name}: {load.film_count} > Lmax {result.max_per_jury}[/]")
    else:
        console.print(f"\n[green]All constraints satisfied.[/]")
