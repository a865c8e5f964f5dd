"""Chart Builder helpers for turning user selections into typed roles.

The selection form collects every slot (x/y/z/group/value) regardless of chart
type. `build_chart_roles` narrows that flat selection to the role variant of
the chart's family, dropping slots the family does not read.
"""

from __future__ import annotations

from dataclasses import dataclass

from analysis.schema import ColumnSchema

from .schema import (
    BubbleRoles,
    CategoryValueRoles,
    ChartRoles,
    GroupedSeriesRoles,
    HeatmapRoles,
    ScatterRoles,
    TableRoles,
    chart_family,
)


@dataclass(frozen=True, slots=True)
class RoleSelection:
    """Flat slot selections as submitted by the Chart Builder.

    Args:
        x_axis: Column bound to the x axis.
        y_axis: Column bound to the y axis.
        z_axis: Column bound to the bubble size.
        group_key: Column whose values split a multi-series chart.
        value_key: Column driving the heatmap color scale.
    """

    x_axis: str | None = None
    y_axis: str | None = None
    z_axis: str | None = None
    group_key: str | None = None
    value_key: str | None = None

    def as_query(self) -> dict[str, str]:
        """Return the non-empty slots as query-string parameters."""

        return {
            name: value
            for name, value in (
                ("x_axis", self.x_axis),
                ("y_axis", self.y_axis),
                ("z_axis", self.z_axis),
                ("group_key", self.group_key),
                ("value_key", self.value_key),
            )
            if value
        }


def build_chart_roles(chart_type: str, selection: RoleSelection) -> ChartRoles:
    """Build the role variant for a chart type from flat selections.

    Args:
        chart_type: Selected chart type.
        selection: Flat slot selections; blank strings count as unbound.

    Returns:
        The role dataclass for the chart's family.
    """

    x_axis = _slot(selection.x_axis)
    y_axis = _slot(selection.y_axis)
    family = chart_family(chart_type)

    if family == "table":
        return TableRoles()
    if family == "multi_series":
        return GroupedSeriesRoles(x_axis=x_axis, y_axis=y_axis, group_key=_slot(selection.group_key))
    if family == "heatmap":
        return HeatmapRoles(x_axis=x_axis, y_axis=y_axis, value_key=_slot(selection.value_key))
    if family == "scatter":
        return ScatterRoles(x_axis=x_axis, y_axis=y_axis)
    if family == "bubble":
        return BubbleRoles(x_axis=x_axis, y_axis=y_axis, z_axis=_slot(selection.z_axis))
    return CategoryValueRoles(x_axis=x_axis, y_axis=y_axis)


def _slot(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def default_role_selection(schema: ColumnSchema) -> RoleSelection:
    """Pick initial slot selections for a freshly loaded dataset.

    The x axis prefers the first categorical column and the y axis the first
    numeric column; the z axis uses a second numeric column when one exists.

    Args:
        schema: Classified dataset columns.

    Returns:
        RoleSelection with best-effort defaults (all None for an empty schema).
    """

    keys = schema.keys
    if not keys:
        return RoleSelection()

    x_axis = schema.categorical_keys[0] if schema.categorical_keys else keys[0]
    if schema.numeric_keys:
        y_axis: str | None = schema.numeric_keys[0]
    else:
        y_axis = next((key for key in keys if key != x_axis), None)
    z_axis = schema.numeric_keys[1] if len(schema.numeric_keys) > 1 else None
    group_key = next((key for key in schema.categorical_keys if key != x_axis), None)
    value_key = schema.numeric_keys[0] if schema.numeric_keys else None

    return RoleSelection(x_axis=x_axis, y_axis=y_axis, z_axis=z_axis, group_key=group_key, value_key=value_key)
