"""
Least-loaded distribution strategy (default).

Most constrained films first (need desc, id asc). Each unit of need goes to
the eligible jury with the smallest current load, ties by ascending jury id.
"""

import logging

from jury_allocator.errors import NoEligibleJuryError
from jury_allocator.models import DistributionPlan
from jury_allocator.strategies._helpers import assign_jury, films_by_need, least_loaded_jury

logger = logging.getLogger(__name__)


def run(plan: DistributionPlan) -> None:
    """Least-loaded greedy: one unit of need at a time."""
    for film_id, need in films_by_need(plan):
        for _ in range(need):
            jury = least_loaded_jury(film_id, plan)
            if jury is None:
                raise NoEligibleJuryError(film_id)
            assign_jury(film_id, jury.id, plan)
            logger.debug(f"Film #{film_id} -> jury #{jury.id} (load {plan.loads[jury.id]})")

    logger.info(f"Least-loaded complete: {len(plan.assignments)} assignments")
