from __future__ import annotations

from datetime import datetime
from pathlib import Path

import openpyxl
import pytest

from jury_allocator.allocator import distribute
from jury_allocator.excel_io import format_output, read_snapshot, write_assignments


def _write_festival(path: Path, with_ratings: bool = True) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Films"
    ws.append(["Title", "ID", "Submitted At"])  # columns found by header, not position
    ws.append(["Sunspring", 1, datetime(2026, 1, 26, 10, 0)])
    ws.append(["The Frost", 2, "2026-01-26T10:01:00"])
    ws.append(["(draft)", None, None])
    ws.append(["Digital Dreams", 3, datetime(2026, 1, 26, 9, 0)])

    ws = wb.create_sheet("Juries")
    ws.append(["ID", "Name", "Email"])
    ws.append([10, "Ada", "ada@festival.test"])
    ws.append([11, None, "bob@festival.test"])
    ws.append([12, "Cy", None])

    if with_ratings:
        ws = wb.create_sheet("Ratings")
        ws.append(["Film ID", "Jury ID", "Score"])
        ws.append([1, 10, 9])
        ws.append([1, 11, 8])
        ws.append([2, 12, 7])

    ws = wb.create_sheet("Notes")
    ws.append(["keep me"])

    wb.save(path)
    return path


def test_read_snapshot(tmp_path: Path) -> None:
    snapshot = read_snapshot(_write_festival(tmp_path / "festival.xlsx"))

    assert [f.id for f in snapshot.films] == [1, 2, 3]
    assert snapshot.films[1].submitted_at == datetime(2026, 1, 26, 10, 1)
    assert snapshot.films[0].title == "Sunspring"
    assert [j.display_name for j in snapshot.juries] == ["Ada", "bob@festival.test", "Cy"]
    assert snapshot.existing_ratings() == {1: {10, 11}, 2: {12}}


def test_ratings_sheet_is_optional(tmp_path: Path) -> None:
    snapshot = read_snapshot(_write_festival(tmp_path / "festival.xlsx", with_ratings=False))
    assert snapshot.ratings == []
    assert snapshot.existing_ratings() == {}


def test_missing_required_column(tmp_path: Path) -> None:
    wb = openpyxl.Workbook()
    wb.active.title = "Films"
    wb.active.append(["Title"])
    wb.create_sheet("Juries").append(["ID"])
    path = tmp_path / "broken.xlsx"
    wb.save(path)

    with pytest.raises(ValueError, match="missing column"):
        read_snapshot(path)


def test_missing_sheet(tmp_path: Path) -> None:
    wb = openpyxl.Workbook()
    wb.active.title = "Films"
    wb.active.append(["ID"])
    path = tmp_path / "nojury.xlsx"
    wb.save(path)

    with pytest.raises(ValueError, match="Juries"):
        read_snapshot(path)


def test_write_assignments_replaces_sheet(tmp_path: Path) -> None:
    path = _write_festival(tmp_path / "festival.xlsx")
    snapshot = read_snapshot(path)

    first = distribute(snapshot.films, snapshot.juries, 2, 3, snapshot.existing_ratings())
    write_assignments(path, first)
    second = distribute(snapshot.films, snapshot.juries, 3, 3, snapshot.existing_ratings())
    write_assignments(path, second)

    wb = openpyxl.load_workbook(path)
    assert wb.sheetnames.count("Assignments") == 1
    assert "Notes" in wb.sheetnames

    rows = list(wb["Assignments"].iter_rows(min_row=2, values_only=True))
    assert [(r[0], r[1]) for r in rows] == [(a.film_id, a.jury_id) for a in second.assignments]

    loads = {r[0]: r[2] for r in wb["Jury Load"].iter_rows(min_row=2, values_only=True)}
    assert loads == second.loads()
    assert list(tmp_path.glob("tmp*.xlsx")) == []


def test_write_assignments_new_workbook(tmp_path: Path) -> None:
    snapshot = read_snapshot(_write_festival(tmp_path / "festival.xlsx"))
    result = distribute(snapshot.films, snapshot.juries, 1, 5)
    out = tmp_path / "assignments.xlsx"

    write_assignments(out, result)

    wb = openpyxl.load_workbook(out)
    assert wb.sheetnames == ["Assignments", "Jury Load"]


def test_format_output(tmp_path: Path) -> None:
    snapshot = read_snapshot(_write_festival(tmp_path / "festival.xlsx", with_ratings=False))
    result = distribute(snapshot.films, snapshot.juries, 1, 1)

    assert format_output(result) == "Film ID\tJury ID\n1\t10\n2\t11\n3\t12"
