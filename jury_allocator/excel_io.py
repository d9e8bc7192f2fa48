"""
Excel I/O for jury distribution.

Reads a festival snapshot workbook (Films, Juries, Ratings sheets) into
plain models. Writes the computed assignments back as a full replacement of
the Assignments sheet, and tab-delimited output for pasting elsewhere.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Hashable

import openpyxl

from jury_allocator.config import (
    FILM_COLUMNS,
    JURY_COLUMNS,
    RATING_COLUMNS,
    SHEET_ASSIGNMENTS,
    SHEET_FILMS,
    SHEET_JURIES,
    SHEET_JURY_LOAD,
    SHEET_RATINGS,
)
from jury_allocator.models import DistributionResult, Film, JuryMember, JuryRating

logger = logging.getLogger(__name__)


@dataclass
class WorkbookSnapshot:
    """One consistent read of films, juries and existing ratings."""

    films: list[Film]
    juries: list[JuryMember]
    ratings: list[JuryRating] = field(default_factory=list)

    def existing_ratings(self) -> dict[Hashable, set]:
        """film_id -> jury ids that already rated it."""
        index: dict[Hashable, set] = {}
        for rating in self.ratings:
            index.setdefault(rating.film_id, set()).add(rating.jury_id)
        return index


def _column_map(ws, wanted: dict[str, str], required: set[str]) -> dict[str, int]:
    """
    Find column indices by header name (robust to column reordering).

    Returns {field: col_index}; optional fields may be missing.
    """
    headers = [cell.value for cell in next(ws.iter_rows(min_row=1, max_row=1), ())]
    found: dict[str, int] = {}
    for i, h in enumerate(headers):
        if h is None:
            continue
        h_str = str(h).strip()
        for key, header in wanted.items():
            if h_str == header and key not in found:
                found[key] = i

    missing = [wanted[k] for k in sorted(required) if k not in found]
    if missing:
        raise ValueError(f"Sheet {ws.title!r} is missing column(s): {', '.join(missing)}")
    return found


def _cell(row: tuple, cols: dict[str, int], key: str):
    idx = cols.get(key)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _as_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def _as_datetime(value) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if value is None or not str(value).strip():
        return None
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _sheet(wb, name: str):
    if name not in wb.sheetnames:
        raise ValueError(f"No {name!r} sheet found (have: {', '.join(wb.sheetnames)})")
    return wb[name]


def read_films(wb) -> list[Film]:
    ws = _sheet(wb, SHEET_FILMS)
    cols = _column_map(ws, FILM_COLUMNS, required={"id"})
    films = []
    for row in ws.iter_rows(min_row=2, values_only=True):
        film_id = _as_int(_cell(row, cols, "id"))
        if film_id is None:
            logger.debug(f"Skipping film row without a valid ID: {row!r}")
            continue
        films.append(
            Film(
                id=film_id,
                title=str(_cell(row, cols, "title") or ""),
                submitted_at=_as_datetime(_cell(row, cols, "submitted_at")),
            )
        )
    return films


def read_juries(wb) -> list[JuryMember]:
    ws = _sheet(wb, SHEET_JURIES)
    cols = _column_map(ws, JURY_COLUMNS, required={"id"})
    juries = []
    for row in ws.iter_rows(min_row=2, values_only=True):
        jury_id = _as_int(_cell(row, cols, "id"))
        if jury_id is None:
            logger.debug(f"Skipping jury row without a valid ID: {row!r}")
            continue
        email = _cell(row, cols, "email")
        juries.append(
            JuryMember(
                id=jury_id,
                name=str(_cell(row, cols, "name") or ""),
                email=str(email) if email else None,
            )
        )
    return juries


def read_ratings(wb) -> list[JuryRating]:
    """Ratings sheet is optional: a festival may not have any votes yet."""
    if SHEET_RATINGS not in wb.sheetnames:
        return []
    ws = wb[SHEET_RATINGS]
    cols = _column_map(ws, RATING_COLUMNS, required={"film_id", "jury_id"})
    ratings = []
    for row in ws.iter_rows(min_row=2, values_only=True):
        film_id = _as_int(_cell(row, cols, "film_id"))
        jury_id = _as_int(_cell(row, cols, "jury_id"))
        if film_id is None or jury_id is None:
            continue
        ratings.append(
            JuryRating(film_id=film_id, jury_id=jury_id, score=_as_int(_cell(row, cols, "score")))
        )
    return ratings


def read_snapshot(filepath: Path) -> WorkbookSnapshot:
    """Read films, juries and existing ratings from one workbook."""
    wb = openpyxl.load_workbook(filepath, data_only=True, read_only=True)
    try:
        snapshot = WorkbookSnapshot(
            films=read_films(wb),
            juries=read_juries(wb),
            ratings=read_ratings(wb),
        )
    finally:
        wb.close()

    logger.info(
        f"Read {Path(filepath).name}: {len(snapshot.films)} films, "
        f"{len(snapshot.juries)} juries, {len(snapshot.ratings)} ratings"
    )
    return snapshot


def write_assignments(filepath: Path, result: DistributionResult) -> None:
    """
    Replace the Assignments and Jury Load sheets with this result.

    Other sheets are kept. The workbook is written to a temp file next to
    the target and swapped in with os.replace, so readers never see a
    half-replaced distribution.
    """
    filepath = Path(filepath)
    if filepath.exists():
        wb = openpyxl.load_workbook(filepath)
    else:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

    for name in (SHEET_ASSIGNMENTS, SHEET_JURY_LOAD):
        if name in wb.sheetnames:
            wb.remove(wb[name])

    names = {load.jury_id: load.jury_name for load in result.stats.per_jury}

    ws = wb.create_sheet(SHEET_ASSIGNMENTS)
    ws.append(["Film ID", "Jury ID", "Jury"])
    for assignment in result.assignments:
        ws.append([assignment.film_id, assignment.jury_id, names.get(assignment.jury_id, "")])

    ws = wb.create_sheet(SHEET_JURY_LOAD)
    ws.append(["Jury ID", "Jury", "Films"])
    for load in result.stats.per_jury:
        ws.append([load.jury_id, load.jury_name, load.film_count])

    fd, tmp_name = tempfile.mkstemp(suffix=".xlsx", dir=filepath.parent)
    os.close(fd)
    try:
        wb.save(tmp_name)
        os.replace(tmp_name, filepath)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Wrote {len(result.assignments)} assignments to {filepath.name}")


def format_output(result: DistributionResult) -> str:
    """
    Format assignments as tab-delimited text.

    - First row: Film ID\\tJury ID
    - Subsequent rows: film_id\\tjury_id, in assignment order
    """
    lines = ["Film ID\tJury ID"]
    for assignment in result.assignments:
        lines.append(f"{assignment.film_id}\t{assignment.jury_id}")
    return "\n".join(lines)
