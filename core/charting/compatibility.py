"""Chart availability rules based on the dataset schema.

The selection UI only offers chart types and columns that can produce a
meaningful chart for the loaded dataset. The reshaper re-checks the same rules
before transforming data.
"""

from __future__ import annotations

from analysis.schema import ColumnSchema

from .schema import CHART_TYPES, ROLE_SLOTS_BY_FAMILY, ChartType, RoleSlot, chart_family

_ONE_CATEGORY_ONE_VALUE = frozenset(
    {"bar", "line", "area", "pie", "donut", "composed", "radar", "radial_bar", "treemap", "funnel"}
)
_TWO_CATEGORIES_ONE_VALUE = frozenset({"heatmap", "stacked_bar", "grouped_bar", "stacked_area"})


def is_chart_available(chart_type: str, numeric_count: int, categorical_count: int) -> bool:
    """Return True when a chart type can be built from the column counts.

    Args:
        chart_type: Requested chart type.
        numeric_count: Number of numeric columns.
        categorical_count: Number of categorical columns.

    Returns:
        Whether the chart type is selectable. Unknown chart types are never
        available.
    """

    if chart_type == "table":
        return True
    if chart_type in _ONE_CATEGORY_ONE_VALUE:
        return categorical_count >= 1 and numeric_count >= 1
    if chart_type == "scatter":
        return numeric_count >= 2
    if chart_type == "bubble":
        return categorical_count >= 1 and numeric_count >= 2
    if chart_type in _TWO_CATEGORIES_ONE_VALUE:
        return categorical_count >= 2 and numeric_count >= 1
    return False


def available_chart_types(schema: ColumnSchema) -> tuple[ChartType, ...]:
    """Return the chart types available for a schema, in menu order."""

    return tuple(
        chart_type
        for chart_type in CHART_TYPES
        if is_chart_available(chart_type, schema.numeric_count, schema.categorical_count)
    )


def role_slots(chart_type: str) -> tuple[RoleSlot, ...]:
    """Return the role slots a chart type needs."""

    return ROLE_SLOTS_BY_FAMILY[chart_family(chart_type)]


def column_options(chart_type: str, schema: ColumnSchema) -> dict[str, tuple[str, ...]]:
    """Return the columns offered for each role slot of a chart type.

    Args:
        chart_type: Selected chart type.
        schema: Classified dataset columns.

    Returns:
        Mapping of slot name to the column keys of the matching kind.
    """

    options: dict[str, tuple[str, ...]] = {}
    for slot in role_slots(chart_type):
        if slot.kind == "numeric":
            options[slot.name] = schema.numeric_keys
        else:
            options[slot.name] = schema.categorical_keys
    return options
