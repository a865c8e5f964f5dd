"""Refinement pipeline for loaded row-sets.

Steps always run in the same order, each one consuming the previous step's
output:

1. trim string cells,
2. drop rows with empty cells,
3. drop duplicate rows,
4. apply case rules,
5. rename (and select) columns.

Rename is unconditional and always last, so case rules address the original
column names. The pipeline never raises for individual rows and never mutates
its input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, get_args

CaseMode = Literal["uppercase", "lowercase", "titlecase"]

CASE_MODES: tuple[str, ...] = get_args(CaseMode)

Row = dict[str, object]


@dataclass(frozen=True, slots=True)
class RefinementOptions:
    """Toggles for the optional cleaning steps.

    Args:
        trim_whitespace: Strip leading/trailing whitespace from string cells.
        remove_nulls: Drop rows containing a null or empty-string cell.
        remove_duplicates: Drop rows whose values repeat an earlier row.
    """

    trim_whitespace: bool = True
    remove_nulls: bool = False
    remove_duplicates: bool = False


@dataclass(frozen=True, slots=True)
class CaseRule:
    """Case change applied to the string values of one column."""

    column: str
    mode: CaseMode

    def __post_init__(self) -> None:
        if self.mode not in CASE_MODES:
            raise ValueError(f"Unsupported case mode: {self.mode!r}.")


def refine_rows(
    rows: Sequence[Mapping[str, object]],
    options: RefinementOptions,
    case_rules: Sequence[CaseRule],
    rename_map: Mapping[str, str],
) -> list[Row]:
    """Run the refinement pipeline over a row-set.

    Args:
        rows: Input rows (left untouched).
        options: Step toggles.
        case_rules: Ordered case rules.
        rename_map: Ordered original -> new column mapping. Columns missing
            from the mapping are dropped from the output.

    Returns:
        Refined rows.
    """

    data: list[Row] = [dict(row) for row in rows]

    if options.trim_whitespace:
        data = [trim_row(row) for row in data]
    if options.remove_nulls:
        data = [row for row in data if not _has_empty_cell(row)]
    if options.remove_duplicates:
        data = drop_duplicate_rows(data)
    if case_rules:
        data = [_apply_case_rules(row, case_rules) for row in data]
    return [rename_row(row, rename_map) for row in data]


def trim_row(row: Mapping[str, object]) -> Row:
    """Return a copy of `row` with string cells stripped."""

    return {key: value.strip() if isinstance(value, str) else value for key, value in row.items()}


def _has_empty_cell(row: Mapping[str, object]) -> bool:
    return any(value is None or value == "" for value in row.values())


def drop_duplicate_rows(rows: Iterable[Row]) -> list[Row]:
    """Drop rows whose sorted values equal an earlier row's sorted values.

    Keys are ignored, so two rows holding the same values under different
    columns are duplicates. The first occurrence is kept.
    """

    seen: set[tuple[tuple[str, str], ...]] = set()
    unique: list[Row] = []
    for row in rows:
        fingerprint = _row_fingerprint(row)
        if fingerprint in seen:
            continue
        seen.add(fingerprint)
        unique.append(row)
    return unique


def _row_fingerprint(row: Mapping[str, object]) -> tuple[tuple[str, str], ...]:
    tokens = [_value_token(value) for value in row.values()]
    return tuple(sorted(tokens))


def _value_token(value: object) -> tuple[str, str]:
    """Return a hashable, totally ordered token for a cell value.

    Numbers share one kind so that `1` and `1.0` compare equal, while `1` and
    `"1"` stay distinct.
    """

    if value is None:
        return ("null", "")
    if isinstance(value, bool):
        return ("bool", str(value))
    if isinstance(value, (int, float)):
        number = float(value)
        return ("number", repr(int(number)) if number.is_integer() else repr(number))
    return ("text", str(value))


def change_case(text: str, mode: CaseMode) -> str:
    """Apply a case mode to a string.

    Title case splits on single spaces so that the original spacing is kept.
    """

    if mode == "uppercase":
        return text.upper()
    if mode == "lowercase":
        return text.lower()
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def _apply_case_rules(row: Row, case_rules: Sequence[CaseRule]) -> Row:
    updated = dict(row)
    for rule in case_rules:
        value = updated.get(rule.column)
        if isinstance(value, str):
            updated[rule.column] = change_case(value, rule.mode)
    return updated


def rename_row(row: Mapping[str, object], rename_map: Mapping[str, str]) -> Row:
    """Return `row` with columns renamed and unmapped columns dropped."""

    renamed: Row = {}
    for original, new_name in rename_map.items():
        if original in row:
            renamed[new_name] = row[original]
    return renamed


def default_rename_map(headers: Iterable[str]) -> dict[str, str]:
    """Return the identity rename mapping for `headers`."""

    return {header: header for header in headers}
