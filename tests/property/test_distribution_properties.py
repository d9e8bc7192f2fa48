from __future__ import annotations

import random

import pytest

from jury_allocator.allocator import distribute, preview_distribution
from jury_allocator.strategies import list_strategies
from tests.helpers import make_films, make_juries


@pytest.mark.parametrize("seed", range(25))
def test_invariants_hold_for_feasible_inputs(seed: int) -> None:
    rng = random.Random(seed)
    n_juries = rng.randint(1, 8)
    n_films = rng.randint(0, 15)
    min_ratings = rng.randint(1, n_juries)
    max_per_jury = -(-n_films * min_ratings // n_juries) + rng.randint(0, 2)
    max_per_jury = max(1, max_per_jury)

    films = make_films(*rng.sample(range(1, 100), n_films))
    juries = make_juries(*rng.sample(range(100, 200), n_juries))

    result = distribute(films, juries, min_ratings, max_per_jury, {})

    # capacity
    assert all(load.film_count <= max_per_jury for load in result.stats.per_jury)
    # coverage
    for film in films:
        assert len(result.juries_for_film(film.id)) == min_ratings
    # no duplicates
    assert len(set(result.assignments)) == len(result.assignments)
    # balance: least-loaded keeps loads within one of each other
    assert result.stats.max_per_jury - result.stats.min_per_jury <= 1


@pytest.mark.parametrize("strategy", list_strategies())
def test_every_strategy_meets_coverage_and_capacity(strategy: str) -> None:
    films = make_films(*range(1, 13))
    juries = make_juries(*range(20, 26))
    existing = {2: {20}, 5: {21, 22}, 9: {25}}

    result = distribute(films, juries, 3, 6, existing, strategy=strategy)

    for film in films:
        new = result.juries_for_film(film.id)
        assert len(new) == max(0, 3 - len(existing.get(film.id, ())))
        assert not set(new) & existing.get(film.id, set())
        assert len(set(new)) == len(new)
    assert result.stats.max_per_jury <= 6


@pytest.mark.parametrize("strategy", list_strategies())
def test_repeated_runs_return_identical_assignments(strategy: str) -> None:
    rng = random.Random(7)
    films = make_films(*range(1, 25))
    juries = make_juries(*range(100, 108))
    existing = {
        film.id: set(rng.sample([j.id for j in juries], rng.randint(0, 2)))
        for film in films
    }

    preview = preview_distribution(films, juries, 3, 12, existing, strategy=strategy)
    commit = distribute(films, juries, 3, 12, existing, strategy=strategy)

    assert preview.assignments == commit.assignments
    assert preview.as_dict() == commit.as_dict()
