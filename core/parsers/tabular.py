"""CSV and JSON parsing into normalized row-sets.

Parsing rules:

- Numeric-looking text cells become numbers (see `analysis.coercion`).
- CSV rows with the wrong number of fields are skipped, not fatal.
- JSON is accepted as an array of objects or as a columnar object of arrays.
- Anything else raises `FormatError`.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from analysis.coercion import Scalar, coerce_scalar
from core.errors import FormatError, UnsupportedFileType

logger = logging.getLogger(__name__)

FileFormat = Literal["csv", "json"]

Row = dict[str, Scalar]

_LINE_SPLIT_RE = re.compile(r"\r\n|\n")


@dataclass(frozen=True, slots=True)
class SkippedRow:
    """Diagnostic for a CSV line dropped because of a field-count mismatch.

    Attributes:
        line_number: 1-based line number within the trimmed content.
        expected_fields: Number of header columns.
        actual_fields: Number of fields found on the line.
    """

    line_number: int
    expected_fields: int
    actual_fields: int


@dataclass(frozen=True, slots=True)
class ParsedTable:
    """Parser output: the row-set plus any skipped-row diagnostics."""

    rows: list[Row]
    skipped_rows: tuple[SkippedRow, ...] = field(default=())

    @property
    def headers(self) -> tuple[str, ...]:
        """Return the column keys of the first row."""

        if not self.rows:
            return ()
        return tuple(self.rows[0].keys())


def sniff_file_format(file_name: str | None, content_type: str | None) -> FileFormat:
    """Select a parser from an upload's content type and file name.

    Args:
        file_name: Client-provided file name.
        content_type: Client-provided MIME type.

    Returns:
        "csv" or "json".

    Raises:
        UnsupportedFileType: When neither hint points to CSV or JSON.
    """

    mime = (content_type or "").lower()
    if "csv" in mime:
        return "csv"
    if "json" in mime:
        return "json"

    name = (file_name or "").lower()
    if name.endswith(".csv"):
        return "csv"
    if name.endswith(".json"):
        return "json"
    raise UnsupportedFileType("Unsupported file type. Please upload CSV or JSON.")


def parse_tabular(content: str, *, file_format: FileFormat) -> ParsedTable:
    """Parse raw text in the given format.

    Raises:
        FormatError: When the content cannot be interpreted.
    """

    if file_format == "csv":
        return parse_csv(content)
    if file_format == "json":
        return parse_json(content)
    raise UnsupportedFileType(f"Unsupported file format: {file_format!r}.")


def parse_csv(content: str) -> ParsedTable:
    """Parse comma-separated text with a header row.

    Args:
        content: CSV text.

    Returns:
        ParsedTable with one row per well-formed data line.

    Raises:
        FormatError: When there is no header plus at least one more line.
    """

    lines = _LINE_SPLIT_RE.split(content.strip())
    if len(lines) < 2:
        raise FormatError("CSV must have a header and at least one data row.")

    header = [name.strip() for name in lines[0].split(",")]
    rows: list[Row] = []
    skipped: list[SkippedRow] = []

    for index, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        values = line.split(",")
        if len(values) != len(header):
            skipped.append(SkippedRow(line_number=index, expected_fields=len(header), actual_fields=len(values)))
            logger.warning(
                "Row %d has %d fields, expected %d. Skipping.", index, len(values), len(header)
            )
            continue
        rows.append({key: coerce_scalar(value.strip()) for key, value in zip(header, values)})

    return ParsedTable(rows=rows, skipped_rows=tuple(skipped))


def parse_json(content: str) -> ParsedTable:
    """Parse a JSON array of objects or a columnar object of arrays.

    Args:
        content: JSON text.

    Returns:
        ParsedTable with normalized rows.

    Raises:
        FormatError: When the text is not JSON or has an unsupported shape.
    """

    try:
        data = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise FormatError("Invalid JSON format.") from exc

    if isinstance(data, list):
        return ParsedTable(rows=_rows_from_records(data))
    if isinstance(data, dict):
        return ParsedTable(rows=_rows_from_columns(data))
    raise FormatError("JSON is not an array of objects or a supported format.")


def _reject_constant(token: str) -> Any:
    raise FormatError("Invalid JSON format.")


def _rows_from_records(records: list[Any]) -> list[Row]:
    rows: list[Row] = []
    for record in records:
        if not isinstance(record, dict):
            raise FormatError("JSON is not an array of objects.")
        row: Row = {}
        for key, value in record.items():
            normalized = _normalize_value(value)
            if normalized is not None:
                row[str(key)] = normalized
        rows.append(row)
    return rows


def _rows_from_columns(columns: dict[str, Any]) -> list[Row]:
    keys = list(columns.keys())
    if not keys or not isinstance(columns[keys[0]], list):
        raise FormatError("JSON is not an array of objects or a supported format.")

    row_count = len(columns[keys[0]])
    usable = [key for key in keys if isinstance(columns[key], list) and len(columns[key]) == row_count]
    dropped = [key for key in keys if key not in usable]
    if dropped:
        logger.warning("Dropping JSON columns with mismatched lengths: %s", ", ".join(dropped))

    rows: list[Row] = []
    for index in range(row_count):
        row: Row = {}
        for key in usable:
            normalized = _normalize_value(columns[key][index])
            if normalized is not None:
                row[str(key)] = normalized
        rows.append(row)

    if not rows:
        raise FormatError("JSON is not an array of objects or a supported format.")
    return rows


def _normalize_value(value: Any) -> Scalar | None:
    """Normalize a decoded JSON value to a row scalar (None means omit)."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and not math.isfinite(value):
        raise FormatError("Invalid JSON format.")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return coerce_scalar(value)
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise FormatError("Invalid JSON format.") from exc
