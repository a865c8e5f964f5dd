"""Forms for core UI workflows.

The visualizer and refinement pages share:
- an upload form for CSV/JSON files,
- a sample dataset picker.

The visualizer adds a chart selection form; the refinement page adds a form
for cleaning options, case rules and column renames.
"""

from __future__ import annotations

from collections.abc import Sequence

from django import forms
from django.conf import settings

from analysis.refinement import CASE_MODES, CaseRule, RefinementOptions
from analysis.schema import ColumnSchema
from core.charting.builder import RoleSelection
from core.charting.schema import CHART_TYPE_LABELS, CHART_TYPES
from core.errors import UnsupportedFileType
from core.parsers.tabular import FileFormat, sniff_file_format
from core.samples import list_samples


class DatasetUploadForm(forms.Form):
    """Validate an uploaded CSV or JSON file and decode its text."""

    file = forms.FileField(label="Dataset", help_text="Upload a CSV or JSON file.")

    def __init__(self, *args, **kwargs) -> None:
        """Initialize decoded-content attributes populated by `clean_file`."""

        super().__init__(*args, **kwargs)
        self.content: str = ""
        self.file_format: FileFormat | None = None

    def clean_file(self):
        """Reject oversized, unsupported or undecodable uploads."""

        upload = self.cleaned_data["file"]
        max_bytes = int(settings.DATAVISION_MAX_UPLOAD_BYTES)
        if upload.size is not None and upload.size > max_bytes:
            raise forms.ValidationError(f"File is too large (limit is {max_bytes} bytes).")

        try:
            self.file_format = sniff_file_format(upload.name, getattr(upload, "content_type", None))
        except UnsupportedFileType as exc:
            raise forms.ValidationError(str(exc)) from exc

        try:
            self.content = upload.read().decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise forms.ValidationError("Could not read the selected file as UTF-8 text.") from exc
        return upload


class SampleDatasetForm(forms.Form):
    """Select one of the bundled sample datasets."""

    sample = forms.ChoiceField(choices=(), label="Sample dataset")

    def __init__(self, *args, **kwargs) -> None:
        """Initialize choices from the sample manifest."""

        super().__init__(*args, **kwargs)
        self.fields["sample"].choices = [(sample.slug, sample.label) for sample in list_samples()]


class ChartSelectionForm(forms.Form):
    """Validate a chart type and its role slot selections.

    Column choices come from the loaded dataset. Whether the combination can
    actually produce a chart is decided later by the chart validator, so the
    page can explain what is missing instead of rejecting the form.
    """

    chart_type = forms.ChoiceField(
        choices=[(chart_type, CHART_TYPE_LABELS[chart_type]) for chart_type in CHART_TYPES],
        label="Chart type",
    )
    x_axis = forms.ChoiceField(required=False, choices=(), label="X-Axis")
    y_axis = forms.ChoiceField(required=False, choices=(), label="Y-Axis")
    z_axis = forms.ChoiceField(required=False, choices=(), label="Z-Axis (Size)")
    group_key = forms.ChoiceField(required=False, choices=(), label="Group By")
    value_key = forms.ChoiceField(required=False, choices=(), label="Value (Color)")

    ROLE_FIELDS: tuple[str, ...] = ("x_axis", "y_axis", "z_axis", "group_key", "value_key")

    def __init__(self, *args, schema: ColumnSchema, **kwargs) -> None:
        """Initialize column choices from the dataset schema."""

        super().__init__(*args, **kwargs)
        choices = [("", "---------")] + [(key, key) for key in schema.keys]
        for name in self.ROLE_FIELDS:
            self.fields[name].choices = choices

    def selection(self) -> RoleSelection:
        """Return the cleaned slot selections."""

        return RoleSelection(**{name: self.cleaned_data.get(name) or None for name in self.ROLE_FIELDS})


class RefinementForm(forms.Form):
    """Validate refinement options, case rules and column renames.

    Rename inputs are generated per dataset header as `rename_<index>` fields.
    Case rules are entered one per line as `column:mode`.
    """

    trim_whitespace = forms.BooleanField(required=False, initial=True, label="Trim whitespace")
    remove_nulls = forms.BooleanField(required=False, initial=False, label="Remove rows with empty values")
    remove_duplicates = forms.BooleanField(required=False, initial=False, label="Remove duplicate rows")
    case_rules = forms.CharField(
        required=False,
        label="Case changes",
        widget=forms.Textarea(attrs={"rows": 3, "cols": 40}),
        help_text=f"One rule per line as column:mode where mode is one of {', '.join(CASE_MODES)}.",
    )

    def __init__(self, *args, headers: Sequence[str], **kwargs) -> None:
        """Add one rename field per dataset header."""

        super().__init__(*args, **kwargs)
        self.headers = tuple(headers)
        for idx, header in enumerate(self.headers):
            self.fields[f"rename_{idx}"] = forms.CharField(
                required=False,
                initial=header,
                label=f"Rename {header}",
                max_length=200,
            )

    def rename_field_names(self) -> list[str]:
        """Return the generated rename field names in header order."""

        return [f"rename_{idx}" for idx in range(len(self.headers))]

    def clean_case_rules(self) -> tuple[CaseRule, ...]:
        """Parse `column:mode` lines into CaseRule values."""

        raw = str(self.cleaned_data.get("case_rules") or "")
        rules: list[CaseRule] = []
        for line_number, line in enumerate(raw.splitlines(), start=1):
            if not line.strip():
                continue
            column, sep, mode = line.rpartition(":")
            column = column.strip()
            mode = mode.strip().lower()
            if not sep or not column:
                raise forms.ValidationError(f"Line {line_number}: expected column:mode.")
            if column not in self.headers:
                raise forms.ValidationError(f"Line {line_number}: unknown column {column!r}.")
            if mode not in CASE_MODES:
                raise forms.ValidationError(f"Line {line_number}: unknown case mode {mode!r}.")
            rules.append(CaseRule(column=column, mode=mode))  # type: ignore[arg-type]
        return tuple(rules)

    def options(self) -> RefinementOptions:
        """Return the cleaned step toggles."""

        return RefinementOptions(
            trim_whitespace=bool(self.cleaned_data.get("trim_whitespace")),
            remove_nulls=bool(self.cleaned_data.get("remove_nulls")),
            remove_duplicates=bool(self.cleaned_data.get("remove_duplicates")),
        )

    def rename_map(self) -> dict[str, str]:
        """Return the original -> new column mapping; blank names keep the original."""

        mapping: dict[str, str] = {}
        for idx, header in enumerate(self.headers):
            new_name = str(self.cleaned_data.get(f"rename_{idx}") or "").strip()
            mapping[header] = new_name or header
        return mapping
