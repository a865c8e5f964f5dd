"""Integration tests for the chart_data and refine_file management commands."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


@pytest.fixture
def scores_csv(tmp_path: Path) -> Path:
    path = tmp_path / "scores.csv"
    path.write_text("name,score\nAlice,10\nBob,20\nAlice,10\n", encoding="utf-8")
    return path


def test_chart_data_prints_reshaped_json(scores_csv: Path) -> None:
    """Emit the bar chart dataset as JSON."""

    out = io.StringIO()
    call_command("chart_data", str(scores_csv), "--chart-type", "bar", "--x", "name", "--y", "score", stdout=out)

    payload = json.loads(out.getvalue())
    assert payload["chart_type"] == "bar"
    assert payload["records"] == [
        {"name": "Alice", "score": 20, "value": 20},
        {"name": "Bob", "score": 20, "value": 20},
    ]


def test_chart_data_reads_columnar_json(tmp_path: Path) -> None:
    """Accept a columnar JSON file."""

    path = tmp_path / "heat.json"
    path.write_text(json.dumps({"x": ["a", "a"], "y": ["p", "q"], "v": [5, 3]}), encoding="utf-8")

    out = io.StringIO()
    call_command(
        "chart_data",
        str(path),
        "--chart-type",
        "heatmap",
        "--x",
        "x",
        "--y",
        "y",
        "--value",
        "v",
        stdout=out,
    )

    assert json.loads(out.getvalue())["records"] == [
        {"x": "a", "y": "p", "value": 5},
        {"x": "a", "y": "q", "value": 3},
    ]


def test_chart_data_reports_skipped_rows_on_stderr(tmp_path: Path) -> None:
    """Write skipped-line diagnostics to stderr."""

    path = tmp_path / "ragged.csv"
    path.write_text("a,b\n1,2\n3\n", encoding="utf-8")

    out, err = io.StringIO(), io.StringIO()
    call_command("chart_data", str(path), stdout=out, stderr=err)

    assert "Skipped line 3: 1 fields, expected 2." in err.getvalue()
    assert json.loads(out.getvalue())["records"] == [{"a": 1, "b": 2}]


def test_chart_data_rejects_unbound_roles(scores_csv: Path) -> None:
    """Fail with the validation errors when a role is missing."""

    with pytest.raises(CommandError, match="Please select a column"):
        call_command("chart_data", str(scores_csv), "--chart-type", "bar", "--x", "name", stdout=io.StringIO())


def test_chart_data_rejects_unsupported_files(tmp_path: Path) -> None:
    """Fail for files that are neither CSV nor JSON."""

    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(CommandError, match="Unsupported file type"):
        call_command("chart_data", str(path), stdout=io.StringIO())


def test_chart_data_rejects_missing_files(tmp_path: Path) -> None:
    """Fail when the file cannot be read."""

    with pytest.raises(CommandError, match="Could not read"):
        call_command("chart_data", str(tmp_path / "missing.csv"), stdout=io.StringIO())


def test_refine_file_prints_csv(scores_csv: Path) -> None:
    """Run the refinement pipeline and print CSV."""

    out = io.StringIO()
    call_command(
        "refine_file",
        str(scores_csv),
        "--remove-duplicates",
        "--case",
        "name:lowercase",
        "--rename",
        "score:points",
        stdout=out,
    )

    assert out.getvalue().strip() == "name,points\nalice,10\nbob,20"


def test_refine_file_writes_output_file(scores_csv: Path, tmp_path: Path) -> None:
    """Write the refined CSV to the requested path."""

    target = tmp_path / "refined.csv"
    out = io.StringIO()

    call_command("refine_file", str(scores_csv), "--output", str(target), stdout=out)

    assert target.read_text(encoding="utf-8") == "name,score\nAlice,10\nBob,20\nAlice,10\n"
    assert "Wrote 3 rows" in out.getvalue()


@pytest.mark.parametrize(
    "args",
    [
        ["--case", "name:shout"],
        ["--case", "uppercase"],
        ["--rename", "city:town"],
        ["--rename", "name:"],
    ],
)
def test_refine_file_rejects_invalid_rules(scores_csv: Path, args: list[str]) -> None:
    """Fail on malformed case and rename arguments."""

    with pytest.raises(CommandError):
        call_command("refine_file", str(scores_csv), *args, stdout=io.StringIO())
