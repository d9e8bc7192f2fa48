"""
Pluggable distribution strategies.

A strategy is a callable (DistributionPlan) -> None that fills
plan.assignments in place. Everything before (validation, feasibility, plan
building) and after (post-condition checks, stats) is shared infrastructure
in distribute().
"""

import importlib
from typing import Callable

from jury_allocator.config import DEFAULT_STRATEGY_NAME
from jury_allocator.models import DistributionPlan

Strategy = Callable[[DistributionPlan], None]

_REGISTRY: dict[str, tuple[str, str]] = {
    # name -> (module_path, function_name), lazy-loaded so pulp is only
    # imported when ilp-balanced actually runs
    "least-loaded": ("jury_allocator.strategies.least_loaded", "run"),
    "round-robin": ("jury_allocator.strategies.round_robin", "run"),
    "ilp-balanced": ("jury_allocator.strategies.ilp_balanced", "run"),
}

DEFAULT_STRATEGY = DEFAULT_STRATEGY_NAME


def get_strategy(name: str) -> Strategy:
    """Look up a strategy by name, importing its module lazily."""
    if name not in _REGISTRY:
        available = ", ".join(_REGISTRY.keys())
        raise ValueError(f"Unknown strategy: {name!r}. Available: {available}")
    module_path, func_name = _REGISTRY[name]
    mod = importlib.import_module(module_path)
    return getattr(mod, func_name)


def list_strategies() -> list[str]:
    return list(_REGISTRY.keys())
