"""
Round-robin distribution strategy.

Cyclic round-robin with offset: R rounds over films sorted by id. In each
round a film starts at its own position in the jury list, moved forward by
shift = max(1, J // R) per round so a film does not land on the same jury
twice. Juries that already rated the film, already hold it, or are full are
skipped in cyclic order.
"""

import logging

from jury_allocator.errors import NoEligibleJuryError
from jury_allocator.models import DistributionPlan
from jury_allocator.strategies._helpers import assign_jury, can_assign

logger = logging.getLogger(__name__)


def run(plan: DistributionPlan) -> None:
    """Round-robin strategy: R shifted passes over the film list."""
    num_juries = len(plan.juries)
    if num_juries == 0 or not plan.needs:
        return

    shift = max(1, num_juries // plan.min_ratings)

    for round_num in range(plan.min_ratings):
        round_offset = round_num * shift

        for film_idx, film in enumerate(plan.films):
            if plan.remaining_need(film.id) <= 0:
                continue

            base_pos = (film_idx + round_offset) % num_juries
            assigned = False
            for attempt in range(num_juries):
                jury = plan.juries[(base_pos + attempt) % num_juries]
                if not can_assign(film.id, jury, plan):
                    continue
                assign_jury(film.id, jury.id, plan)
                assigned = True
                break

            if not assigned:
                raise NoEligibleJuryError(film.id, round_number=round_num + 1)

    logger.info(f"Round-robin complete: {len(plan.assignments)} assignments (shift={shift})")
