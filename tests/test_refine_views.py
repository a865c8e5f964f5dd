"""Integration tests for the refinement page and CSV export."""

from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

pytestmark = pytest.mark.integration


def _upload(client, content: bytes = b"name,score\n Alice ,10\nAlice,10\nBob,20\n") -> None:
    upload = SimpleUploadedFile("scores.csv", content, content_type="text/csv")
    client.post(reverse("core:refine_data"), {"file": upload})


@pytest.mark.django_db
def test_refine_page_shows_original_rows_as_refined_preview(client) -> None:
    """Preview the loaded rows before any refinement runs."""

    _upload(client)

    response = client.get(reverse("core:refine_data"))

    assert response.status_code == 200
    assert response.context["refined_count"] == 3
    assert response.context["rename_fields"][0].name == "rename_0"


@pytest.mark.django_db
def test_refine_applies_steps_and_export_downloads_csv(client) -> None:
    """Run the pipeline and download the refined rows."""

    _upload(client)

    response = client.post(
        reverse("core:refine_data"),
        {
            "action": "refine",
            "trim_whitespace": "on",
            "remove_duplicates": "on",
            "case_rules": "name:uppercase",
            "rename_0": "Name",
            "rename_1": "",
        },
        follow=True,
    )

    assert b"Applied selected transformations." in response.content
    assert response.context["refined_count"] == 2

    export = client.get(reverse("core:export_refined_csv"))

    assert export.status_code == 200
    assert export["Content-Disposition"] == 'attachment; filename="scores_refined.csv"'
    assert export.content.decode("utf-8") == "Name,score\nALICE,10\nBOB,20"


@pytest.mark.django_db
def test_refine_rejects_unknown_case_rule_column(client) -> None:
    """Re-render the form with an error for unknown columns."""

    _upload(client)

    response = client.post(
        reverse("core:refine_data"),
        {"action": "refine", "trim_whitespace": "on", "case_rules": "city:uppercase"},
    )

    assert response.status_code == 200
    assert "case_rules" in response.context["refine_form"].errors


@pytest.mark.django_db
def test_refine_without_dataset_reports_error(client) -> None:
    """Ask for a dataset before refining."""

    response = client.post(reverse("core:refine_data"), {"action": "refine"})

    assert response.status_code == 200
    assert b"Upload a dataset before applying refinements." in response.content


@pytest.mark.django_db
def test_export_without_dataset_returns_400(client) -> None:
    """Refuse to export when nothing is loaded."""

    response = client.get(reverse("core:export_refined_csv"))

    assert response.status_code == 400


@pytest.mark.django_db
def test_export_before_refinement_uses_loaded_rows(client) -> None:
    """Export the loaded rows when no refinement has run."""

    _upload(client, content=b"city,note\nParis,north\n")

    response = client.get(reverse("core:export_refined_csv"))

    assert response.status_code == 200
    assert response.content.decode("utf-8") == "city,note\nParis,north"


@pytest.mark.django_db
def test_uploading_new_dataset_discards_refined_rows(client) -> None:
    """Start from the new dataset after a re-upload."""

    _upload(client)
    client.post(reverse("core:refine_data"), {"action": "refine", "remove_duplicates": "on"})

    _upload(client, content=b"city\nOslo\n")
    response = client.get(reverse("core:export_refined_csv"))

    assert response.content.decode("utf-8") == "city\nOslo"


@pytest.mark.django_db
def test_refine_workflow_is_separate_from_visualizer(client) -> None:
    """Keep the refinement dataset out of the visualizer."""

    _upload(client)

    response = client.get(reverse("core:visualizer"))

    assert response.context["dataset"] is None


@pytest.mark.django_db
def test_refine_sample_loads_users_json(client) -> None:
    """Load the JSON sample into the refinement workflow."""

    response = client.post(reverse("core:refine_sample"), {"sample": "users"}, follow=True)

    assert b"Successfully parsed users.json" in response.content
    assert response.context["dataset"].file_format == "json"
