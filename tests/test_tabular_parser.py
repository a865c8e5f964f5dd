"""Tests for CSV/JSON parsing into row-sets."""

from __future__ import annotations

import logging

import pytest

from core.errors import FormatError, UnsupportedFileType
from core.parsers.tabular import SkippedRow, parse_csv, parse_json, parse_tabular, sniff_file_format

pytestmark = pytest.mark.unit


def test_parse_csv_yields_one_row_per_data_line() -> None:
    """Parse a well-formed CSV keyed by its trimmed header."""

    parsed = parse_csv(" name , score\nAlice,10\nBob,20\nAlice,10\n")

    assert parsed.headers == ("name", "score")
    assert parsed.rows == [
        {"name": "Alice", "score": 10},
        {"name": "Bob", "score": 20},
        {"name": "Alice", "score": 10},
    ]
    assert parsed.skipped_rows == ()


def test_parse_csv_handles_crlf_and_blank_lines() -> None:
    """Accept CRLF line endings and ignore blank lines."""

    parsed = parse_csv("\r\n\r\ncity,temp\r\nOslo, 4.5 \r\n\r\n  \r\nRome,18\r\n")

    assert parsed.rows == [{"city": "Oslo", "temp": 4.5}, {"city": "Rome", "temp": 18}]


def test_parse_csv_skips_rows_with_mismatched_field_counts(caplog: pytest.LogCaptureFixture) -> None:
    """Skip rows with the wrong number of fields and report them."""

    with caplog.at_level(logging.WARNING, logger="core.parsers.tabular"):
        parsed = parse_csv("a,b\n1,2\n3\n4,5,6\n7,8")

    assert parsed.rows == [{"a": 1, "b": 2}, {"a": 7, "b": 8}]
    assert parsed.skipped_rows == (
        SkippedRow(line_number=3, expected_fields=2, actual_fields=1),
        SkippedRow(line_number=4, expected_fields=2, actual_fields=3),
    )
    assert "Row 3 has 1 fields, expected 2" in caplog.text


def test_parse_csv_keeps_empty_fields_as_empty_strings() -> None:
    """Store empty fields as empty strings rather than numbers."""

    parsed = parse_csv("a,b\n,2")

    assert parsed.rows == [{"a": "", "b": 2}]


@pytest.mark.parametrize("content", ["", "   \n  ", "only,a,header"])
def test_parse_csv_requires_header_and_data_line(content: str) -> None:
    """Fail when fewer than two lines are present."""

    with pytest.raises(FormatError):
        parse_csv(content)


def test_parse_json_array_coerces_numeric_strings() -> None:
    """Coerce numeric strings in an array of objects and keep other values."""

    parsed = parse_json('[{"name": "Ann", "age": "31", "score": 9.5, "note": " hi "}]')

    assert parsed.rows == [{"name": "Ann", "age": 31, "score": 9.5, "note": " hi "}]


def test_parse_json_array_normalizes_null_bool_and_nested_values() -> None:
    """Omit nulls, stringify booleans and nested structures."""

    parsed = parse_json('[{"a": null, "b": true, "c": [1, 2], "d": {"k": "v"}}]')

    assert parsed.rows == [{"b": "true", "c": "[1,2]", "d": '{"k":"v"}'}]


def test_parse_json_empty_array_yields_empty_rowset() -> None:
    """Accept an empty array as an empty row-set."""

    assert parse_json("[]").rows == []


def test_parse_json_columnar_object_is_transposed() -> None:
    """Transpose a columnar object and drop keys with mismatched lengths."""

    parsed = parse_json('{"city": ["Oslo", "Rome"], "temp": ["4", 18], "extra": [1, 2, 3], "flag": "x"}')

    assert parsed.rows == [{"city": "Oslo", "temp": 4}, {"city": "Rome", "temp": 18}]


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '"just a string"',
        "42",
        "{}",
        '{"a": 1}',
        '{"a": []}',
        "[1, 2, 3]",
        '[{"a": 1}, "b"]',
    ],
)
def test_parse_json_rejects_unsupported_shapes(content: str) -> None:
    """Fail for invalid JSON and unsupported shapes."""

    with pytest.raises(FormatError):
        parse_json(content)


@pytest.mark.parametrize(
    ("file_name", "content_type", "expected"),
    [
        ("data.csv", "", "csv"),
        ("DATA.JSON", None, "json"),
        ("export", "text/csv", "csv"),
        ("export.txt", "application/json", "json"),
        ("data.csv", "application/vnd.ms-excel", "csv"),
    ],
)
def test_sniff_file_format(file_name: str, content_type: str | None, expected: str) -> None:
    """Pick the parser from MIME type or extension."""

    assert sniff_file_format(file_name, content_type) == expected


def test_sniff_file_format_rejects_other_types() -> None:
    """Reject files that are neither CSV nor JSON."""

    with pytest.raises(UnsupportedFileType):
        sniff_file_format("report.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")


def test_parse_tabular_dispatches_by_format() -> None:
    """Dispatch to the CSV or JSON parser."""

    assert parse_tabular("a\n1", file_format="csv").rows == [{"a": 1}]
    assert parse_tabular('[{"a": "1"}]', file_format="json").rows == [{"a": 1}]


@pytest.mark.parametrize(
    "content",
    [
        '[{"a": NaN, "b": "x"}]',
        '[{"a": Infinity, "b": "x"}]',
        '{"a": [-Infinity], "b": ["x"]}',
        '[{"a": 1e400, "b": "x"}]',
        '[{"a": {"nested": 1e400}, "b": "x"}]',
    ],
)
def test_parse_json_rejects_non_finite_numbers(content: str) -> None:
    """Reject NaN/Infinity tokens and numbers that overflow to infinity."""

    with pytest.raises(FormatError, match="Invalid JSON format."):
        parse_json(content)
