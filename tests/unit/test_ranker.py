from __future__ import annotations

from datetime import datetime

import pytest

from jury_allocator.errors import InvalidParameterError
from jury_allocator.models import Film, JuryRating, RatingAggregateRow
from jury_allocator.ranker import aggregate_ratings, rank_films, ranking_key, top_rated


def test_full_ordering_matches_reference_dataset(ranking_dataset) -> None:
    ranked = rank_films(ranking_dataset)

    assert [r.title for r in ranked] == [
        "Sunspring",
        "Digital Dreams",
        "The Frost",
        "Mars Colony 2084",
        "No Ratings Film",
    ]
    assert [r.rank for r in ranked] == [1, 2, 3, 4, 5]


def test_tie_breaks(ranking_dataset) -> None:
    by_title = {r.title: r for r in rank_films(ranking_dataset)}

    assert by_title["Sunspring"].rank == 1  # more ratings wins
    assert by_title["Digital Dreams"].rank < by_title["The Frost"].rank  # earlier wins


def test_null_average_ranks_last() -> None:
    rows = [
        RatingAggregateRow(1, None, 0, datetime(2026, 1, 1)),
        RatingAggregateRow(2, 7.0, 5, datetime(2026, 1, 2)),
    ]
    ranked = rank_films(rows)

    assert [(r.film_id, r.rank) for r in ranked] == [(2, 1), (1, 2)]


def test_zero_average_is_not_null() -> None:
    rows = [
        RatingAggregateRow(1, None, 9, datetime(2026, 1, 1)),
        RatingAggregateRow(2, 0.0, 1, datetime(2026, 1, 5)),
    ]
    assert [r.film_id for r in rank_films(rows)] == [2, 1]


def test_null_group_orders_by_count_then_time() -> None:
    rows = [
        RatingAggregateRow(1, None, 0, datetime(2026, 1, 3)),
        RatingAggregateRow(2, None, 0, datetime(2026, 1, 1)),
        RatingAggregateRow(3, None, 2, datetime(2026, 1, 9)),
    ]
    assert [r.film_id for r in rank_films(rows)] == [3, 2, 1]


def test_identical_keys_keep_input_order() -> None:
    ts = datetime(2026, 1, 1)
    rows = [RatingAggregateRow(i, 6.0, 2, ts) for i in (9, 3, 7)]

    assert [r.film_id for r in rank_films(rows)] == [9, 3, 7]
    assert [r.film_id for r in rank_films(rows)] == [9, 3, 7]


def test_ranks_are_contiguous(ranking_dataset) -> None:
    rows = ranking_dataset * 3
    ranked = rank_films(rows)
    assert sorted(r.rank for r in ranked) == list(range(1, len(rows) + 1))


def test_empty_input() -> None:
    assert rank_films([]) == []


def test_ranking_key_is_consistent(ranking_dataset) -> None:
    keys = [ranking_key(row) for row in ranking_dataset]
    assert len(set(keys)) == len(keys)


def test_ranked_row_as_dict(ranking_dataset) -> None:
    first = rank_films(ranking_dataset)[0]
    payload = first.as_dict()
    assert payload["rank"] == 1
    assert payload["film_id"] == 1
    assert payload["average_rating"] == 8.5


def test_top_rated_filters_and_renumbers(ranking_dataset) -> None:
    top = top_rated(ranking_dataset, limit=2, min_count=4)

    assert [(r.rank, r.title) for r in top] == [(1, "Sunspring"), (2, "Mars Colony 2084")]


def test_aggregate_ratings() -> None:
    films = [
        Film(1, datetime(2026, 1, 1), "A"),
        Film(2, datetime(2026, 1, 2), "B"),
        Film(3, datetime(2026, 1, 3), "C"),
    ]
    ratings = [
        JuryRating(1, 10, 8),
        JuryRating(1, 11, 9),
        JuryRating(2, 10, 1),
        JuryRating(2, 11, 1),
        JuryRating(2, 12, 1),
        JuryRating(2, 13, 2),
        JuryRating(3, 10, None),  # assigned, not rated yet
        JuryRating(99, 10, 5),  # not in the ranking set
    ]
    rows = {row.film_id: row for row in aggregate_ratings(films, ratings)}

    assert rows[1].average_rating == 8.5
    assert rows[1].rating_count == 2
    assert rows[2].average_rating == 1.3  # 1.25 rounds half-up
    assert rows[3].average_rating is None
    assert rows[3].rating_count == 0
    assert rows[3].title == "C"


@pytest.mark.parametrize("score", [0, 11, True])
def test_aggregate_rejects_out_of_range_scores(score) -> None:
    with pytest.raises(InvalidParameterError):
        aggregate_ratings([Film(1, datetime(2026, 1, 1))], [JuryRating(1, 10, score)])


def test_aggregate_requires_submission_time() -> None:
    with pytest.raises(InvalidParameterError, match="submission time"):
        aggregate_ratings([Film(1)], [])
