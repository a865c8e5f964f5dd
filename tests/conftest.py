"""Pytest fixtures shared across the dataVision test suite."""

from __future__ import annotations

from collections.abc import Sequence

import pytest


@pytest.fixture
def score_rows() -> list[dict[str, object]]:
    """Return the parsed rows of a small name/score dataset."""

    return [
        {"name": "Alice", "score": 10},
        {"name": "Bob", "score": 20},
        {"name": "Alice", "score": 10},
    ]


@pytest.fixture
def sales_rows() -> list[dict[str, object]]:
    """Return rows with two categorical columns and two numeric columns."""

    return [
        {"month": "Jan", "region": "North", "units": 10, "revenue": 100},
        {"month": "Jan", "region": "South", "units": 5, "revenue": 50},
        {"month": "Feb", "region": "South", "units": 7, "revenue": 70},
        {"month": "Feb", "region": "East", "units": 3, "revenue": 30},
        {"month": "Jan", "region": "North", "units": 2, "revenue": 20},
    ]


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
