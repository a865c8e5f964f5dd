"""Column classification for loaded row-sets."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .coercion import is_numeric

Row = dict[str, object]


@dataclass(frozen=True, slots=True)
class ColumnSchema:
    """Numeric and categorical column keys of a row-set.

    Args:
        keys: All column keys of the first row, in order.
        numeric_keys: Keys whose every value is numeric.
        categorical_keys: Remaining keys, in the same order.
    """

    keys: tuple[str, ...]
    numeric_keys: tuple[str, ...]
    categorical_keys: tuple[str, ...]

    @property
    def numeric_count(self) -> int:
        """Return the number of numeric columns."""

        return len(self.numeric_keys)

    @property
    def categorical_count(self) -> int:
        """Return the number of categorical columns."""

        return len(self.categorical_keys)

    def is_numeric(self, key: str) -> bool:
        """Return True when `key` is a numeric column."""

        return key in self.numeric_keys

    def is_categorical(self, key: str) -> bool:
        """Return True when `key` is a categorical column."""

        return key in self.categorical_keys


EMPTY_SCHEMA = ColumnSchema(keys=(), numeric_keys=(), categorical_keys=())


def classify_columns(rows: Sequence[Mapping[str, object]]) -> ColumnSchema:
    """Classify the columns of a row-set.

    Keys are taken from the first row. A key is numeric when every row holds a
    numeric value at that key; a row missing the key makes it categorical.

    Args:
        rows: Parsed rows.

    Returns:
        ColumnSchema for the row-set (empty for an empty row-set).
    """

    if not rows:
        return EMPTY_SCHEMA

    keys = tuple(rows[0].keys())
    numeric: list[str] = []
    categorical: list[str] = []
    for key in keys:
        if all(key in row and is_numeric(row[key]) for row in rows):
            numeric.append(key)
        else:
            categorical.append(key)
    return ColumnSchema(keys=keys, numeric_keys=tuple(numeric), categorical_keys=tuple(categorical))
