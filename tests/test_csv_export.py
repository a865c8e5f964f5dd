"""Tests for CSV export of refined rows."""

from __future__ import annotations

import pytest

from analysis.csv_export import export_filename, rows_to_csv

pytestmark = pytest.mark.unit


def test_rows_to_csv_writes_header_and_rows(score_rows) -> None:
    """Write the header from the first row and one line per row."""

    assert rows_to_csv(score_rows) == "name,score\nAlice,10\nBob,20\nAlice,10"


def test_rows_to_csv_quotes_fields_with_commas() -> None:
    """Wrap comma-containing strings in double quotes."""

    rows = [{"city": "Paris, FR", "note": 'say "hi"'}]

    assert rows_to_csv(rows) == 'city,note\n"Paris, FR",say "hi"'


def test_rows_to_csv_formats_numbers_and_missing_values() -> None:
    """Render floats, integral floats, booleans and missing cells."""

    rows = [{"a": 1.5, "b": 2.0, "c": True}, {"a": None, "b": 3}]

    assert rows_to_csv(rows) == "a,b,c\n1.5,2,true\n,3,"


def test_rows_to_csv_empty_input() -> None:
    """Return an empty string for no rows."""

    assert rows_to_csv([]) == ""


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("sales.csv", "sales_refined.csv"),
        ("report.final.json", "report_refined.csv"),
        ("", "data_refined.csv"),
        (None, "data_refined.csv"),
        (".hidden", "data_refined.csv"),
    ],
)
def test_export_filename(source: str | None, expected: str) -> None:
    """Derive the download name from the source stem."""

    assert export_filename(source) == expected
