"""
Parameter validation and capacity-vs-demand checks.

Shared by the preview and commit paths so that the same inputs always get
the same accept/reject decision before any assignment work starts.
"""

import logging
from typing import Hashable, Iterable, Mapping, Sequence

from jury_allocator.config import MAX_MIN_RATINGS, MAX_PER_JURY_LIMIT
from jury_allocator.errors import (
    InfeasibleCapacityError,
    InsufficientJuriesError,
    InvalidParameterError,
)
from jury_allocator.models import FeasibilityReport, Film, JuryMember

logger = logging.getLogger(__name__)

ExistingRatings = Mapping[Hashable, Iterable[Hashable]]


def _require_positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(name, value, "must be an integer")
    if value < 1:
        raise InvalidParameterError(name, value, "must be at least 1")


def validate_parameters(min_ratings: int, max_per_jury: int) -> None:
    """Check R >= 1 and Lmax >= 1."""
    _require_positive_int("R", min_ratings)
    _require_positive_int("Lmax", max_per_jury)


def validate_request_parameters(min_ratings: int, max_per_jury: int) -> None:
    """Check R and Lmax against the bounds an admin request may use."""
    validate_parameters(min_ratings, max_per_jury)
    if min_ratings > MAX_MIN_RATINGS:
        raise InvalidParameterError(
            "R", min_ratings, f"must be between 1 and {MAX_MIN_RATINGS}"
        )
    if max_per_jury > MAX_PER_JURY_LIMIT:
        raise InvalidParameterError(
            "Lmax", max_per_jury, f"must be between 1 and {MAX_PER_JURY_LIMIT}"
        )


def _check_distinct(name: str, ids: list[Hashable]) -> None:
    seen = set()
    for entity_id in ids:
        if entity_id in seen:
            raise InvalidParameterError(name, entity_id, "duplicate id")
        seen.add(entity_id)


def validate_roster(films: Sequence[Film], juries: Sequence[JuryMember]) -> None:
    """Film ids and jury ids must each be distinct."""
    _check_distinct("film_id", [f.id for f in films])
    _check_distinct("jury_id", [j.id for j in juries])


def rated_by(existing_ratings: ExistingRatings, film_id: Hashable) -> frozenset:
    """Jury ids that already rated a film (empty if none)."""
    return frozenset(existing_ratings.get(film_id) or ())


def compute_needs(
    films: Sequence[Film],
    min_ratings: int,
    existing_ratings: ExistingRatings,
) -> dict[Hashable, int]:
    """
    Missing ratings per film: max(0, R - |already rated|).

    Films already at or above R are left out. Every recorded rater counts,
    including ones no longer in the jury roster.
    """
    needs: dict[Hashable, int] = {}
    for film in sorted(films, key=lambda f: f.id):
        need = max(0, min_ratings - len(rated_by(existing_ratings, film.id)))
        if need > 0:
            needs[film.id] = need
    return needs


def check_feasibility(
    films: Sequence[Film],
    juries: Sequence[JuryMember],
    min_ratings: int,
    max_per_jury: int,
    existing_ratings: ExistingRatings,
) -> FeasibilityReport:
    """
    Compare total demand with jury capacity, then per-film jury supply.

    Raises InfeasibleCapacityError when sum(need) > |juries| * Lmax, and
    InsufficientJuriesError when a single film needs more distinct juries
    than remain who have not rated it. Returns the report otherwise.
    """
    validate_parameters(min_ratings, max_per_jury)

    needs = compute_needs(films, min_ratings, existing_ratings)
    total_needed = sum(needs.values())
    jury_count = len(juries)
    max_capacity = jury_count * max_per_jury

    logger.info(
        f"Feasibility: {total_needed} assignments needed for {len(needs)} films, "
        f"capacity {max_capacity} ({jury_count} juries x {max_per_jury})"
    )

    if total_needed > max_capacity:
        raise InfeasibleCapacityError(
            total_needed=total_needed,
            max_capacity=max_capacity,
            jury_count=jury_count,
            max_per_jury=max_per_jury,
        )

    jury_ids = frozenset(j.id for j in juries)
    for film_id, need in needs.items():
        available = len(jury_ids - rated_by(existing_ratings, film_id))
        if need > available:
            raise InsufficientJuriesError(film_id, need, available)

    return FeasibilityReport(
        needs=needs,
        total_needed=total_needed,
        max_capacity=max_capacity,
        jury_count=jury_count,
        max_per_jury=max_per_jury,
    )
