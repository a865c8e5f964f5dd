"""Reshape row-sets into chart-ready datasets.

Each chart family has one transformation:

- single-series charts sum the y column per x value,
- multi-series charts pivot the group column into one series per value,
- composed and treemap charts sum per x value with their own record shape,
- heatmap, scatter and bubble charts emit one record per row,
- tables pass rows through unchanged.

Grouping keys are emitted in the order they are first seen while scanning
rows from the top; nothing is sorted, so the same input always yields the
same output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import cast

from analysis.coercion import format_scalar, to_number
from analysis.schema import classify_columns

from core.errors import ConfigurationError

from .schema import (
    BubbleRoles,
    CategoryValueRoles,
    ChartRoles,
    ChartType,
    GroupedSeriesRoles,
    HeatmapRoles,
    ScatterRoles,
    chart_family,
)
from .validator import validate_chart_roles

logger = logging.getLogger(__name__)

FUNNEL_PALETTE: tuple[str, ...] = (
    "hsl(var(--chart-1))",
    "hsl(var(--chart-2))",
    "hsl(var(--chart-3))",
    "hsl(var(--chart-4))",
    "hsl(var(--chart-5))",
)

Record = dict[str, object]


@dataclass(frozen=True, slots=True)
class ChartDataset:
    """Chart-ready output of `reshape`.

    Args:
        chart_type: Chart type the records were shaped for.
        records: Records consumed by the renderer.
        series: Series keys for multi-series charts, in first-seen order.
        warnings: Non-fatal validation warnings.
    """

    chart_type: ChartType
    records: list[Record]
    series: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default=())

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable payload."""

        return {
            "chart_type": self.chart_type,
            "records": self.records,
            "series": list(self.series),
            "warnings": list(self.warnings),
        }


def reshape(rows: Sequence[Mapping[str, object]], chart_type: ChartType, roles: ChartRoles) -> ChartDataset:
    """Transform rows into the dataset a chart type needs.

    Args:
        rows: Parsed (or refined) rows.
        chart_type: Selected chart type.
        roles: Role variant for the chart's family.

    Returns:
        ChartDataset for the renderer.

    Raises:
        ConfigurationError: When there are no rows, the chart type is not
            available for the dataset, or a required role is unbound.
    """

    if not rows:
        raise ConfigurationError("No data available for the selected chart configuration.")

    result = validate_chart_roles(chart_type, roles, classify_columns(rows))
    if not result.is_valid:
        logger.debug("Rejected %s chart configuration: %s", chart_type, "; ".join(result.errors))
        raise ConfigurationError(result.errors[0], errors=result.errors)

    family = chart_family(chart_type)
    series: tuple[str, ...] = ()

    if family == "table":
        records = [dict(row) for row in rows]
    elif family == "single_series":
        roles = cast(CategoryValueRoles, roles)
        records = aggregate_single_series(rows, x_axis=_bound(roles.x_axis), y_axis=_bound(roles.y_axis))
        if chart_type == "funnel":
            records = [
                {**record, "fill": FUNNEL_PALETTE[index % len(FUNNEL_PALETTE)]} for index, record in enumerate(records)
            ]
    elif family == "multi_series":
        roles = cast(GroupedSeriesRoles, roles)
        records, series = pivot_series(
            rows,
            x_axis=_bound(roles.x_axis),
            y_axis=_bound(roles.y_axis),
            group_key=_bound(roles.group_key),
        )
    elif family == "composed":
        roles = cast(CategoryValueRoles, roles)
        records = aggregate_composed(rows, x_axis=_bound(roles.x_axis), y_axis=_bound(roles.y_axis))
    elif family == "treemap":
        roles = cast(CategoryValueRoles, roles)
        records = aggregate_treemap(rows, x_axis=_bound(roles.x_axis), y_axis=_bound(roles.y_axis))
    elif family == "heatmap":
        roles = cast(HeatmapRoles, roles)
        records = heatmap_cells(
            rows, x_axis=_bound(roles.x_axis), y_axis=_bound(roles.y_axis), value_key=_bound(roles.value_key)
        )
    elif family == "bubble":
        roles = cast(BubbleRoles, roles)
        records = numeric_points(rows, (_bound(roles.x_axis), _bound(roles.y_axis), _bound(roles.z_axis)))
    else:
        roles = cast(ScatterRoles, roles)
        records = numeric_points(rows, (_bound(roles.x_axis), _bound(roles.y_axis)))

    return ChartDataset(chart_type=chart_type, records=records, series=series, warnings=result.warnings)


def _bound(column: str | None) -> str:
    if not column:
        raise ConfigurationError("Please select a column for every chart role.")
    return column


def _is_blank(value: object) -> bool:
    return value is None or value == ""


def aggregate_single_series(rows: Sequence[Mapping[str, object]], *, x_axis: str, y_axis: str) -> list[Record]:
    """Sum `y_axis` per distinct `x_axis` value.

    Rows missing either column are skipped. Records carry both the generic
    `name`/`value` fields and the column-keyed fields.
    """

    totals: dict[object, int | float] = {}
    for row in rows:
        if x_axis not in row or y_axis not in row:
            continue
        category = row[x_axis]
        totals[category] = totals.get(category, 0) + to_number(row[y_axis])

    return [
        {x_axis: category, y_axis: total, "name": category, "value": total} for category, total in totals.items()
    ]


def pivot_series(
    rows: Sequence[Mapping[str, object]],
    *,
    x_axis: str,
    y_axis: str,
    group_key: str,
) -> tuple[list[Record], tuple[str, ...]]:
    """Pivot `group_key` values into series summed per `x_axis` value.

    Every record holds every series key; combinations that never occur are 0.

    Returns:
        Records plus the series keys in first-seen order.
    """

    totals: dict[object, dict[str, int | float]] = {}
    series: dict[str, None] = {}
    for row in rows:
        category = row.get(x_axis)
        group = row.get(group_key)
        if _is_blank(category) or _is_blank(group):
            continue
        series_key = format_scalar(group)
        series.setdefault(series_key, None)
        bucket = totals.setdefault(category, {})
        bucket[series_key] = bucket.get(series_key, 0) + to_number(row.get(y_axis))

    series_keys = tuple(series)
    records: list[Record] = []
    for category, bucket in totals.items():
        record: Record = {x_axis: category}
        for series_key in series_keys:
            record[series_key] = bucket.get(series_key, 0)
        records.append(record)
    return records, series_keys


def _sum_by_category(rows: Sequence[Mapping[str, object]], *, x_axis: str, y_axis: str) -> dict[object, int | float]:
    totals: dict[object, int | float] = {}
    for row in rows:
        category = row.get(x_axis)
        if _is_blank(category):
            continue
        totals[category] = totals.get(category, 0) + to_number(row.get(y_axis))
    return totals


def aggregate_composed(rows: Sequence[Mapping[str, object]], *, x_axis: str, y_axis: str) -> list[Record]:
    """Sum `y_axis` per `x_axis` value for a combined bar + line chart."""

    totals = _sum_by_category(rows, x_axis=x_axis, y_axis=y_axis)
    return [{x_axis: category, y_axis: total} for category, total in totals.items()]


def aggregate_treemap(rows: Sequence[Mapping[str, object]], *, x_axis: str, y_axis: str) -> list[Record]:
    """Sum `y_axis` per `x_axis` value as treemap tiles."""

    totals = _sum_by_category(rows, x_axis=x_axis, y_axis=y_axis)
    return [{"name": category, "size": total, "value": total} for category, total in totals.items()]


def heatmap_cells(
    rows: Sequence[Mapping[str, object]],
    *,
    x_axis: str,
    y_axis: str,
    value_key: str,
) -> list[Record]:
    """Emit one heatmap cell per row, without aggregation."""

    cells: list[Record] = []
    for row in rows:
        cell: Record = {key: row[key] for key in (x_axis, y_axis) if row.get(key) is not None}
        cell["value"] = to_number(row.get(value_key))
        cells.append(cell)
    return cells


def numeric_points(rows: Sequence[Mapping[str, object]], columns: Sequence[str]) -> list[Record]:
    """Emit one point per row with `columns` coerced to numbers.

    Other fields of the row are kept for tooltips.
    """

    points: list[Record] = []
    for row in rows:
        point: Record = dict(row)
        for column in columns:
            point[column] = to_number(row.get(column))
        points.append(point)
    return points
