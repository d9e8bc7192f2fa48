from __future__ import annotations

from datetime import datetime

import pytest

from jury_allocator.models import Film, JuryMember, RatingAggregateRow
from tests.helpers import make_films, make_juries


@pytest.fixture
def small_roster() -> tuple[list[Film], list[JuryMember]]:
    return make_films(1, 2), make_juries(10, 11, 12)


@pytest.fixture
def ranking_dataset() -> list[RatingAggregateRow]:
    return [
        RatingAggregateRow(1, 8.5, 4, datetime(2026, 1, 26, 10, 0), "Sunspring"),
        RatingAggregateRow(2, 8.5, 3, datetime(2026, 1, 26, 10, 1), "The Frost"),
        RatingAggregateRow(3, 8.5, 3, datetime(2026, 1, 26, 9, 0), "Digital Dreams"),
        RatingAggregateRow(4, 7.0, 5, datetime(2026, 1, 26, 10, 2), "Mars Colony 2084"),
        RatingAggregateRow(5, None, 0, datetime(2026, 1, 25, 8, 0), "No Ratings Film"),
    ]
