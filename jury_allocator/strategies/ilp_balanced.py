"""
ILP-balanced distribution strategy.

Integer Linear Programming via PuLP/CBC: choose exactly `need` juries per
film among those who have not rated it, respect Lmax, and minimise the
peak jury load, then maximise the lowest load. A tiny final term prefers
lower-id juries so that equally balanced solutions resolve the same way on
every run.

Unlike the greedy strategies this one finds a distribution whenever one
exists, e.g. when existing ratings fence juries in awkward ways. Only a
proven optimum is returned: if CBC stops on ILP_TIME_LIMIT first, the run
fails with ILP_NO_SOLUTION instead of handing back whatever incumbent it
had, so the same snapshot always yields the same assignments.
"""

import logging

import pulp

from jury_allocator.config import ILP_TIME_LIMIT
from jury_allocator.errors import DistributionError
from jury_allocator.models import DistributionPlan
from jury_allocator.strategies._helpers import assign_jury, films_by_need

logger = logging.getLogger(__name__)


def run(plan: DistributionPlan) -> None:
    """ILP allocation: min-max load assignment via mixed-integer programming."""
    if not plan.needs or not plan.juries:
        return

    film_order = films_by_need(plan)
    jury_rank = {jury.id: idx for idx, jury in enumerate(plan.juries)}
    total_needed = sum(plan.needs.values())

    prob = pulp.LpProblem("jury_distribution", pulp.LpMinimize)

    # x[f, j] = 1 if jury j must rate film f (eligible pairs only)
    x = {}
    for f_idx, (film_id, _) in enumerate(film_order):
        rated = plan.already_rated(film_id)
        for jury in plan.juries:
            if jury.id in rated:
                continue
            x[film_id, jury.id] = pulp.LpVariable(
                f"x_{f_idx}_{jury_rank[jury.id]}", cat="Binary"
            )

    peak = pulp.LpVariable("peak", lowBound=0, upBound=plan.max_per_jury, cat="Integer")
    floor = pulp.LpVariable("floor", lowBound=0, upBound=plan.max_per_jury, cat="Integer")

    # Coverage: exactly `need` new juries per film
    for f_idx, (film_id, need) in enumerate(film_order):
        prob += (
            pulp.lpSum(var for (f, _), var in x.items() if f == film_id) == need,
            f"coverage_{f_idx}",
        )

    # Peak and floor load; peak is bounded by Lmax, which caps every jury
    for jury in plan.juries:
        load = pulp.lpSum(var for (_, j), var in x.items() if j == jury.id)
        prob += load <= peak, f"peak_{jury_rank[jury.id]}"
        prob += load >= floor, f"floor_{jury_rank[jury.id]}"

    # Lexicographic: lowest peak, then highest floor, then lower-id juries.
    # One unit of peak outweighs any floor change; the id term sums to < 1.
    tie_weight = 1.0 / (1 + len(plan.juries) * total_needed)
    prob += (plan.max_per_jury + 1) * peak - floor + tie_weight * pulp.lpSum(
        jury_rank[j] * var for (_, j), var in x.items()
    )

    solver = pulp.PULP_CBC_CMD(msg=0, timeLimit=ILP_TIME_LIMIT, threads=1)
    status = prob.solve(solver)

    # An incumbent cut off by the time limit depends on wall-clock progress,
    # so only a proven optimum is accepted.
    if prob.sol_status != pulp.constants.LpSolutionOptimal:
        solution = pulp.constants.LpSolution.get(prob.sol_status, str(prob.sol_status))
        raise DistributionError(
            f"ILP solver found no optimal distribution within {ILP_TIME_LIMIT}s: "
            f"{pulp.LpStatus[status]} ({solution})",
            error_code="ILP_NO_SOLUTION",
            details={"status": pulp.LpStatus[status], "solution": solution},
        )

    for film_id, _ in film_order:
        for jury in plan.juries:
            var = x.get((film_id, jury.id))
            if var is not None and var.varValue is not None and var.varValue > 0.5:
                assign_jury(film_id, jury.id, plan)

    logger.info(
        f"ILP solved: status={pulp.LpStatus[status]}, "
        f"peak load={int(round(peak.varValue or 0))}, "
        f"assignments={len(plan.assignments)}"
    )
