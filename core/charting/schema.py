"""Schema types for chart selection.

A chart is described by a `ChartType` plus a role mapping. Role mappings are a
tagged union: each chart family has its own frozen dataclass carrying only the
slots that family reads, so illegal slot combinations cannot be expressed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

ChartType = Literal[
    "table",
    "bar",
    "line",
    "area",
    "pie",
    "donut",
    "scatter",
    "bubble",
    "composed",
    "radar",
    "radial_bar",
    "treemap",
    "funnel",
    "heatmap",
    "stacked_bar",
    "grouped_bar",
    "stacked_area",
]

CHART_TYPES: tuple[ChartType, ...] = get_args(ChartType)

ChartFamily = Literal[
    "table",
    "single_series",
    "multi_series",
    "composed",
    "treemap",
    "heatmap",
    "bubble",
    "scatter",
]

RoleSlotName = Literal["x_axis", "y_axis", "z_axis", "group_key", "value_key"]

ColumnKind = Literal["categorical", "numeric"]

CHART_TYPE_LABELS: dict[ChartType, str] = {
    "table": "Table",
    "bar": "Bar Chart",
    "line": "Line Chart",
    "area": "Area Chart",
    "pie": "Pie Chart",
    "donut": "Donut Chart",
    "scatter": "Scatter Chart",
    "bubble": "Bubble Chart",
    "composed": "Composed Chart",
    "radar": "Radar Chart",
    "radial_bar": "Radial Bar Chart",
    "treemap": "Treemap",
    "funnel": "Funnel Chart",
    "heatmap": "Heatmap",
    "stacked_bar": "Stacked Bar Chart",
    "grouped_bar": "Grouped Bar Chart",
    "stacked_area": "Stacked Area Chart",
}

SINGLE_SERIES_TYPES: frozenset[str] = frozenset(
    {"bar", "line", "area", "pie", "donut", "funnel", "radar", "radial_bar"}
)
MULTI_SERIES_TYPES: frozenset[str] = frozenset({"stacked_bar", "grouped_bar", "stacked_area"})


def chart_family(chart_type: str) -> ChartFamily:
    """Return the transformation family for a chart type.

    Raises:
        ValueError: When `chart_type` is not a known ChartType.
    """

    if chart_type in SINGLE_SERIES_TYPES:
        return "single_series"
    if chart_type in MULTI_SERIES_TYPES:
        return "multi_series"
    if chart_type in ("table", "composed", "treemap", "heatmap", "bubble", "scatter"):
        return chart_type  # type: ignore[return-value]
    raise ValueError(f"Unknown chart type: {chart_type!r}.")


@dataclass(frozen=True, slots=True)
class RoleSlot:
    """A role slot offered for a chart type.

    Args:
        name: Slot name (matches the role dataclass field).
        label: Display label.
        kind: Column kind accepted by the slot.
    """

    name: RoleSlotName
    label: str
    kind: ColumnKind


@dataclass(frozen=True, slots=True)
class TableRoles:
    """Tables use no roles."""


@dataclass(frozen=True, slots=True)
class CategoryValueRoles:
    """Roles for single-series, composed and treemap charts.

    Args:
        x_axis: Categorical grouping column.
        y_axis: Numeric column summed per group.
    """

    x_axis: str | None
    y_axis: str | None


@dataclass(frozen=True, slots=True)
class GroupedSeriesRoles:
    """Roles for stacked/grouped multi-series charts.

    Args:
        x_axis: Categorical column for the primary axis.
        y_axis: Numeric column summed per (x, group) pair.
        group_key: Categorical column whose values become series.
    """

    x_axis: str | None
    y_axis: str | None
    group_key: str | None


@dataclass(frozen=True, slots=True)
class HeatmapRoles:
    """Roles for heatmaps.

    Args:
        x_axis: Categorical column for columns of cells.
        y_axis: Categorical column for rows of cells.
        value_key: Numeric column used for the cell color scale.
    """

    x_axis: str | None
    y_axis: str | None
    value_key: str | None


@dataclass(frozen=True, slots=True)
class ScatterRoles:
    """Roles for scatter charts (both axes numeric)."""

    x_axis: str | None
    y_axis: str | None


@dataclass(frozen=True, slots=True)
class BubbleRoles:
    """Roles for bubble charts; `z_axis` drives the bubble size."""

    x_axis: str | None
    y_axis: str | None
    z_axis: str | None


ChartRoles = TableRoles | CategoryValueRoles | GroupedSeriesRoles | HeatmapRoles | ScatterRoles | BubbleRoles

ROLE_TYPE_BY_FAMILY: dict[ChartFamily, type] = {
    "table": TableRoles,
    "single_series": CategoryValueRoles,
    "composed": CategoryValueRoles,
    "treemap": CategoryValueRoles,
    "multi_series": GroupedSeriesRoles,
    "heatmap": HeatmapRoles,
    "scatter": ScatterRoles,
    "bubble": BubbleRoles,
}

_X_CATEGORY = RoleSlot(name="x_axis", label="X-Axis (Category)", kind="categorical")
_Y_VALUE = RoleSlot(name="y_axis", label="Y-Axis (Value)", kind="numeric")

ROLE_SLOTS_BY_FAMILY: dict[ChartFamily, tuple[RoleSlot, ...]] = {
    "table": (),
    "single_series": (_X_CATEGORY, _Y_VALUE),
    "composed": (_X_CATEGORY, _Y_VALUE),
    "treemap": (_X_CATEGORY, _Y_VALUE),
    "multi_series": (
        _X_CATEGORY,
        _Y_VALUE,
        RoleSlot(name="group_key", label="Group By", kind="categorical"),
    ),
    "heatmap": (
        _X_CATEGORY,
        RoleSlot(name="y_axis", label="Y-Axis (Category)", kind="categorical"),
        RoleSlot(name="value_key", label="Value (Color)", kind="numeric"),
    ),
    "scatter": (
        RoleSlot(name="x_axis", label="X-Axis (Value)", kind="numeric"),
        _Y_VALUE,
    ),
    "bubble": (
        RoleSlot(name="x_axis", label="X-Axis (Value)", kind="numeric"),
        _Y_VALUE,
        RoleSlot(name="z_axis", label="Z-Axis (Size)", kind="numeric"),
    ),
}
