"""Tests for session-scoped dataset state and the service layer."""

from __future__ import annotations

import logging

import pytest

from analysis.refinement import CaseRule, RefinementOptions
from core.charting.builder import RoleSelection
from core.errors import ConfigurationError, FormatError, UnsupportedFileType
from core.services import build_chart_dataset, load_dataset, refine_dataset
from core.session import DatasetSession, LoadedDataset

pytestmark = pytest.mark.unit


def _load_scores(dataset_session: DatasetSession) -> LoadedDataset:
    dataset, _ = load_dataset(
        dataset_session,
        file_name="scores.csv",
        content_type="text/csv",
        content="name,score\nAlice,10\nBob,20\nAlice,10\n",
    )
    return dataset


def test_current_is_none_before_any_load() -> None:
    """Report no dataset for a fresh session."""

    assert DatasetSession({}, workflow="visualizer").current() is None


def test_load_dataset_replaces_session_state(caplog: pytest.LogCaptureFixture) -> None:
    """Store the parsed rows and log the load."""

    store: dict[str, object] = {}
    dataset_session = DatasetSession(store, workflow="visualizer")

    with caplog.at_level(logging.INFO, logger="core.services"):
        dataset = _load_scores(dataset_session)

    assert dataset.file_format == "csv"
    current = dataset_session.current()
    assert current == dataset
    assert current.headers == ("name", "score")
    assert "Loaded scores.csv into visualizer workflow" in caplog.text


def test_workflows_do_not_share_datasets() -> None:
    """Keep visualizer and refinement datasets apart in one session."""

    store: dict[str, object] = {}
    _load_scores(DatasetSession(store, workflow="visualizer"))

    assert DatasetSession(store, workflow="refine").current() is None


def test_failed_load_keeps_previous_dataset() -> None:
    """Leave the session untouched when parsing fails."""

    store: dict[str, object] = {}
    dataset_session = DatasetSession(store, workflow="visualizer")
    previous = _load_scores(dataset_session)

    with pytest.raises(FormatError):
        load_dataset(dataset_session, file_name="broken.json", content_type="application/json", content="{oops")
    with pytest.raises(UnsupportedFileType):
        load_dataset(dataset_session, file_name="notes.txt", content_type="text/plain", content="hello")

    assert dataset_session.current() == previous


def test_replacing_dataset_discards_refined_rows() -> None:
    """Drop refined rows derived from the previous dataset."""

    dataset_session = DatasetSession({}, workflow="refine")
    _load_scores(dataset_session)
    dataset_session.store_refined_rows([{"name": "Alice"}])

    _load_scores(dataset_session)

    assert dataset_session.refined_rows() is None


def test_clear_forgets_dataset_and_refined_rows() -> None:
    """Reset the workflow state."""

    dataset_session = DatasetSession({}, workflow="refine")
    _load_scores(dataset_session)
    dataset_session.store_refined_rows([])

    dataset_session.clear()

    assert dataset_session.current() is None
    assert dataset_session.refined_rows() is None


def test_build_chart_dataset_uses_selection() -> None:
    """Reshape the session dataset for a role selection."""

    dataset_session = DatasetSession({}, workflow="visualizer")
    dataset = _load_scores(dataset_session)

    chart = build_chart_dataset(dataset, chart_type="bar", selection=RoleSelection(x_axis="name", y_axis="score"))

    assert [record["value"] for record in chart.records] == [20, 20]


def test_build_chart_dataset_propagates_configuration_errors() -> None:
    """Raise when the selection leaves a role unbound."""

    dataset = _load_scores(DatasetSession({}, workflow="visualizer"))

    with pytest.raises(ConfigurationError):
        build_chart_dataset(dataset, chart_type="bar", selection=RoleSelection(x_axis="name"))


def test_refine_dataset_stores_refined_rows() -> None:
    """Store refined rows without touching the loaded dataset."""

    dataset_session = DatasetSession({}, workflow="refine")
    dataset = _load_scores(dataset_session)

    refined = refine_dataset(
        dataset_session,
        options=RefinementOptions(remove_duplicates=True),
        case_rules=(CaseRule(column="name", mode="uppercase"),),
        rename_map={"name": "Name", "score": "Score"},
    )

    assert refined == [{"Name": "ALICE", "Score": 10}, {"Name": "BOB", "Score": 20}]
    assert dataset_session.refined_rows() == refined
    assert dataset_session.current() == dataset


def test_refine_dataset_without_dataset_returns_empty() -> None:
    """Return no rows when nothing is loaded."""

    dataset_session = DatasetSession({}, workflow="refine")

    assert refine_dataset(dataset_session, options=RefinementOptions(), case_rules=(), rename_map={}) == []
    assert dataset_session.refined_rows() is None
