"""Validation for chart type and role selections.

Role selections are user input, so they are checked against the loaded
dataset before any reshaping happens. Errors block the chart; warnings are
shown next to it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from analysis.schema import ColumnSchema

from .compatibility import is_chart_available, role_slots
from .schema import CHART_TYPE_LABELS, ROLE_TYPE_BY_FAMILY, ChartRoles, chart_family


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating a chart selection."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_chart_roles(chart_type: str, roles: ChartRoles, schema: ColumnSchema) -> ValidationResult:
    """Validate a chart type and role mapping against a dataset schema.

    Args:
        chart_type: Selected chart type.
        roles: Role variant built for the chart.
        schema: Classified dataset columns.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    try:
        family = chart_family(chart_type)
    except ValueError:
        return ValidationResult(is_valid=False, errors=(f"Unknown chart type: {chart_type!r}.",))

    label = CHART_TYPE_LABELS.get(chart_type, chart_type)  # type: ignore[call-overload]
    expected_roles = ROLE_TYPE_BY_FAMILY[family]
    if not isinstance(roles, expected_roles):
        errors.append(f"{label} expects {expected_roles.__name__}, got {type(roles).__name__}.")
        return ValidationResult(is_valid=False, errors=tuple(errors))

    if not is_chart_available(chart_type, schema.numeric_count, schema.categorical_count):
        errors.append(
            f"{label} is not available for this dataset "
            f"({schema.numeric_count} numeric, {schema.categorical_count} categorical columns)."
        )

    slots = {slot.name: slot for slot in role_slots(chart_type)}
    for role_field in fields(roles):
        column = getattr(roles, role_field.name)
        slot = slots.get(role_field.name)
        slot_label = slot.label if slot is not None else role_field.name
        if not column:
            errors.append(f"Please select a column for {slot_label}.")
            continue
        if column not in schema.keys:
            warnings.append(f"Column {column!r} selected for {slot_label} is not in the dataset.")
            continue
        if slot is None:
            continue
        if slot.kind == "numeric" and not schema.is_numeric(column):
            warnings.append(f"Column {column!r} is not numeric; non-numeric values count as 0.")
        if slot.kind == "categorical" and not schema.is_categorical(column):
            warnings.append(f"Column {column!r} is numeric but {slot_label} expects a category.")

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
