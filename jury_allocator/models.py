"""Data models for jury assignment and film ranking."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Hashable


@dataclass(frozen=True)
class Film:
    """A film eligible for jury coverage (pre-filtered by the caller)."""

    id: Hashable  # must be orderable (ints in practice)
    submitted_at: datetime | None = None
    title: str = ""  # display only


@dataclass(frozen=True)
class JuryMember:
    """A jury member who can be assigned films to rate."""

    id: Hashable
    name: str = ""
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or f"Jury #{self.id}"


@dataclass(frozen=True, order=True)
class Assignment:
    """One jury member must rate one film."""

    film_id: Hashable
    jury_id: Hashable


@dataclass(frozen=True)
class JuryRating:
    """A score already given by a jury member (1-10)."""

    film_id: Hashable
    jury_id: Hashable
    score: int | None = None


@dataclass
class JuryLoad:
    jury_id: Hashable
    jury_name: str
    film_count: int


@dataclass
class DistributionStats:
    """Load summary over one assignment batch. Always derived, never stored."""

    total_assignments: int
    jury_count: int
    min_per_jury: int
    max_per_jury: int
    avg_per_jury: float
    per_jury: list[JuryLoad] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FeasibilityReport:
    """Demand vs capacity for one distribution request."""

    needs: dict[Hashable, int]  # film_id -> missing ratings (need > 0 only)
    total_needed: int
    max_capacity: int
    jury_count: int
    max_per_jury: int

    @property
    def spare_capacity(self) -> int:
        return self.max_capacity - self.total_needed


@dataclass
class DistributionPlan:
    """
    Working state of a single distribution run.

    Strategies fill ``assignments`` in place through the helpers in
    ``jury_allocator.strategies._helpers``. Everything here is local to one
    invocation; caller-owned inputs are snapshotted, never referenced.
    """

    films: list[Film]  # sorted by id
    juries: list[JuryMember]  # sorted by id
    needs: dict[Hashable, int]  # film_id -> need (need > 0 only)
    existing: dict[Hashable, frozenset]  # film_id -> jury ids who already rated
    min_ratings: int
    max_per_jury: int
    loads: dict[Hashable, int] = field(default_factory=dict)  # jury_id -> new assignments
    assigned: dict[Hashable, set] = field(default_factory=dict)  # jury_id -> film ids
    film_counts: dict[Hashable, int] = field(default_factory=dict)  # film_id -> new assignments
    assignments: list[Assignment] = field(default_factory=list)

    def __post_init__(self) -> None:
        for jury in self.juries:
            self.loads.setdefault(jury.id, 0)
            self.assigned.setdefault(jury.id, set())

    def already_rated(self, film_id: Hashable) -> frozenset:
        return self.existing.get(film_id, frozenset())

    def assigned_count(self, film_id: Hashable) -> int:
        """New assignments made so far for a film in this run."""
        return self.film_counts.get(film_id, 0)

    def remaining_need(self, film_id: Hashable) -> int:
        return self.needs.get(film_id, 0) - self.assigned_count(film_id)


@dataclass
class DistributionResult:
    """Complete output of one distribution run."""

    assignments: list[Assignment]
    stats: DistributionStats
    strategy: str
    min_ratings: int
    max_per_jury: int
    total_needed: int = 0
    max_capacity: int = 0

    def loads(self) -> dict[Hashable, int]:
        return {load.jury_id: load.film_count for load in self.stats.per_jury}

    def films_for_jury(self, jury_id: Hashable) -> list[Hashable]:
        return [a.film_id for a in self.assignments if a.jury_id == jury_id]

    def juries_for_film(self, film_id: Hashable) -> list[Hashable]:
        return [a.jury_id for a in self.assignments if a.film_id == film_id]

    def as_dict(self) -> dict[str, Any]:
        return {
            "R": self.min_ratings,
            "Lmax": self.max_per_jury,
            "strategy": self.strategy,
            "total_needed": self.total_needed,
            "max_capacity": self.max_capacity,
            "assignments": [
                {"film_id": a.film_id, "jury_id": a.jury_id} for a in self.assignments
            ],
            "stats": self.stats.as_dict(),
        }


@dataclass(frozen=True)
class RatingAggregateRow:
    """Per-film rating aggregate, the ranker's input."""

    film_id: Hashable
    average_rating: float | None  # None = no ratings yet
    rating_count: int
    created_at: datetime
    title: str = ""


@dataclass(frozen=True)
class RankedRow:
    rank: int
    row: RatingAggregateRow

    @property
    def film_id(self) -> Hashable:
        return self.row.film_id

    @property
    def title(self) -> str:
        return self.row.title

    @property
    def average_rating(self) -> float | None:
        return self.row.average_rating

    @property
    def rating_count(self) -> int:
        return self.row.rating_count

    @property
    def created_at(self) -> datetime:
        return self.row.created_at

    def as_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, **asdict(self.row)}


@dataclass
class JuryProgress:
    """How far a jury member is through an applied assignment list."""

    jury_id: Hashable
    jury_name: str
    assigned: int
    rated: int

    @property
    def unrated(self) -> int:
        return self.assigned - self.rated
