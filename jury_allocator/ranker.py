"""
Film ranking from jury rating aggregates.

Ordering, highest priority first:
  1. average rating descending, films with no ratings (None) always last
  2. rating count descending
  3. creation time ascending (earlier submission wins)

A numeric 0.0 average is a real score and sorts ahead of every None.
Rows identical on all three keys keep their input order (stable sort).
"""

import logging
from typing import Hashable, Iterable, Sequence

from jury_allocator.config import (
    RATING_MAX,
    RATING_MIN,
    TOP_RATED_LIMIT,
    TOP_RATED_MIN_COUNT,
)
from jury_allocator.errors import InvalidParameterError
from jury_allocator.models import Film, JuryRating, RankedRow, RatingAggregateRow
from jury_allocator.rounding import round_half_up

logger = logging.getLogger(__name__)


def ranking_key(row: RatingAggregateRow) -> tuple:
    """Sort key implementing the three-level tie-break."""
    if row.average_rating is None:
        return (1, 0.0, -row.rating_count, row.created_at)
    return (0, -row.average_rating, -row.rating_count, row.created_at)


def rank_films(rows: Iterable[RatingAggregateRow]) -> list[RankedRow]:
    """Order rows and number them 1..N with no gaps or ties."""
    ordered = sorted(rows, key=ranking_key)
    return [RankedRow(rank=idx, row=row) for idx, row in enumerate(ordered, start=1)]


def top_rated(
    rows: Iterable[RatingAggregateRow],
    limit: int = TOP_RATED_LIMIT,
    min_count: int = TOP_RATED_MIN_COUNT,
) -> list[RankedRow]:
    """Best `limit` films among those with at least `min_count` ratings."""
    eligible = [
        row for row in rows
        if row.average_rating is not None and row.rating_count >= min_count
    ]
    return rank_films(eligible)[:limit]


def aggregate_ratings(films: Sequence[Film], ratings: Iterable[JuryRating]) -> list[RatingAggregateRow]:
    """
    Build one aggregate row per film from individual jury scores.

    Films without a submission time cannot be ranked, so every film passed
    here must carry one. Scores outside 1-10 are rejected; ratings for films
    not in the list are ignored.
    """
    scores: dict[Hashable, list[int]] = {film.id: [] for film in films}
    ignored = 0

    for rating in ratings:
        if rating.score is None:
            continue
        if isinstance(rating.score, bool) or not isinstance(rating.score, int) or not (
            RATING_MIN <= rating.score <= RATING_MAX
        ):
            raise InvalidParameterError(
                "score", rating.score, f"must be an integer between {RATING_MIN} and {RATING_MAX}"
            )
        if rating.film_id not in scores:
            ignored += 1
            continue
        scores[rating.film_id].append(rating.score)

    if ignored:
        logger.warning(f"Ignored {ignored} ratings for films outside the ranking set")

    rows = []
    for film in films:
        if film.submitted_at is None:
            raise InvalidParameterError("submitted_at", None, f"film #{film.id} has no submission time")
        film_scores = scores[film.id]
        rows.append(
            RatingAggregateRow(
                film_id=film.id,
                average_rating=round_half_up(sum(film_scores), len(film_scores)) if film_scores else None,
                rating_count=len(film_scores),
                created_at=film.submitted_at,
                title=film.title,
            )
        )

    logger.info(f"Aggregated ratings for {len(rows)} films")
    return rows


def print_ranking(ranked: Sequence[RankedRow], title: str = "Film Ranking") -> None:
    """Print the ranking as a rich table."""
    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(title=title)
    table.add_column("#", justify="right", style="bold")
    table.add_column("Film", style="cyan")
    table.add_column("Avg", justify="right", style="green")
    table.add_column("Ratings", justify="right")
    table.add_column("Submitted")

    for entry in ranked:
        avg = f"{entry.average_rating:.1f}" if entry.average_rating is not None else "[dim]-[/]"
        table.add_row(
            str(entry.rank),
            entry.title or f"Film #{entry.film_id}",
            avg,
            str(entry.rating_count),
            entry.created_at.isoformat(sep=" ", timespec="minutes"),
        )

    console.print(table)
