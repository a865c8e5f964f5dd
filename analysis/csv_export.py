"""CSV serialization for refined row-sets.

The output format is intentionally simple: string fields containing a comma
are wrapped in double quotes and nothing else is escaped. Embedded quotes and
newlines are written as-is.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .coercion import format_scalar


def rows_to_csv(rows: Sequence[Mapping[str, object]]) -> str:
    """Serialize rows to CSV text.

    Args:
        rows: Rows to export. The header comes from the first row's keys.

    Returns:
        CSV text with lines joined by `\\n` and no trailing newline, or an
        empty string when there are no rows.
    """

    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_format_field(row.get(header)) for header in headers))
    return "\n".join(lines)


def _format_field(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        if "," in value:
            return f'"{value}"'
        return value
    return format_scalar(value)


def export_filename(source_name: str | None) -> str:
    """Return the download name for a refined export of `source_name`."""

    stem = (source_name or "").split(".")[0]
    return f"{stem or 'data'}_refined.csv"
