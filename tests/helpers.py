from __future__ import annotations

from datetime import datetime

from jury_allocator.models import Film, JuryMember


def make_films(*ids: int) -> list[Film]:
    return [Film(id=i, submitted_at=datetime(2026, 1, 1, 9, i % 60), title=f"Film {i}") for i in ids]


def make_juries(*ids: int) -> list[JuryMember]:
    return [JuryMember(id=i, name=f"Jury {i}", email=f"jury{i}@festival.test") for i in ids]
