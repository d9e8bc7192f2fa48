"""
Shared helper functions for distribution strategies.

Common eligibility checks, mutation helpers and ordering utilities used
across multiple strategies.
"""

from typing import Hashable

from jury_allocator.models import Assignment, DistributionPlan, JuryMember


def can_assign(film_id: Hashable, jury: JuryMember, plan: DistributionPlan) -> bool:
    """
    Composite check: can this jury take this film?

    Checks existing rating, duplicate assignment in this run, and Lmax.
    """
    if jury.id in plan.already_rated(film_id):
        return False
    if film_id in plan.assigned[jury.id]:
        return False
    if plan.loads[jury.id] >= plan.max_per_jury:
        return False
    return True


def eligible_juries(film_id: Hashable, plan: DistributionPlan) -> list[JuryMember]:
    """Juries that can take the film, in ascending id order."""
    return [jury for jury in plan.juries if can_assign(film_id, jury, plan)]


def least_loaded_jury(film_id: Hashable, plan: DistributionPlan) -> JuryMember | None:
    """Eligible jury with the smallest load; ties go to the smallest id."""
    candidates = eligible_juries(film_id, plan)
    if not candidates:
        return None
    return min(candidates, key=lambda j: (plan.loads[j.id], j.id))


def assign_jury(film_id: Hashable, jury_id: Hashable, plan: DistributionPlan) -> None:
    """Record an assignment and bump the counters."""
    plan.assignments.append(Assignment(film_id=film_id, jury_id=jury_id))
    plan.loads[jury_id] += 1
    plan.assigned[jury_id].add(film_id)
    plan.film_counts[film_id] = plan.film_counts.get(film_id, 0) + 1


def films_by_need(plan: DistributionPlan) -> list[tuple[Hashable, int]]:
    """(film_id, need) ordered by need descending, then film id ascending."""
    return sorted(plan.needs.items(), key=lambda kv: (-kv[1], kv[0]))
