"""Views for dataset upload, chart selection and data refinement."""

from __future__ import annotations

from django.conf import settings
from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse, QueryDict
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from analysis.csv_export import export_filename, rows_to_csv
from analysis.schema import ColumnSchema, classify_columns
from core.charting.builder import default_role_selection
from core.charting.compatibility import available_chart_types, column_options, role_slots
from core.charting.reshape import ChartDataset
from core.charting.schema import CHART_TYPE_LABELS, CHART_TYPES
from core.errors import ConfigurationError, FormatError, UnsupportedFileType
from core.forms import ChartSelectionForm, DatasetUploadForm, RefinementForm, SampleDatasetForm
from core.samples import get_sample, list_samples, read_sample
from core.services import build_chart_dataset, load_dataset, load_sample_dataset, refine_dataset
from core.session import DatasetSession, LoadedDataset


def _visualizer_session(request: HttpRequest) -> DatasetSession:
    return DatasetSession(request.session, workflow="visualizer")


def _refine_session(request: HttpRequest) -> DatasetSession:
    return DatasetSession(request.session, workflow="refine")


def _handle_upload(request: HttpRequest, dataset_session: DatasetSession) -> None:
    """Load an uploaded file into `dataset_session`, reporting via messages."""

    form = DatasetUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        for error in form.errors.get("file", ["No file selected."]):
            messages.error(request, str(error))
        return

    upload = form.cleaned_data["file"]
    try:
        dataset, parsed = load_dataset(
            dataset_session,
            file_name=upload.name,
            content_type=getattr(upload, "content_type", None),
            content=form.content,
        )
    except (FormatError, UnsupportedFileType) as exc:
        messages.error(request, str(exc))
        return
    _report_loaded(request, dataset, skipped=len(parsed.skipped_rows))


def _handle_sample(request: HttpRequest, dataset_session: DatasetSession) -> None:
    """Load the selected sample into `dataset_session`."""

    form = SampleDatasetForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Could not load the sample dataset.")
        return
    sample = get_sample(str(form.cleaned_data["sample"]))
    if sample is None:
        messages.error(request, "Could not load the sample dataset.")
        return
    try:
        dataset, parsed = load_sample_dataset(dataset_session, sample)
    except (FormatError, UnsupportedFileType, OSError) as exc:
        messages.error(request, f"Could not load the sample dataset: {exc}")
        return
    _report_loaded(request, dataset, skipped=len(parsed.skipped_rows))


def _report_loaded(request: HttpRequest, dataset: LoadedDataset, *, skipped: int) -> None:
    messages.success(request, f"Successfully parsed {dataset.name} ({len(dataset.rows)} rows).")
    if skipped:
        messages.warning(request, f"Skipped {skipped} rows with an incorrect number of columns.")


def _chart_selection_form(query: QueryDict, schema: ColumnSchema) -> ChartSelectionForm:
    """Bind the chart selection form, filling unset fields with defaults."""

    data: dict[str, str] = {"chart_type": "table", **default_role_selection(schema).as_query()}
    for name in ("chart_type", *ChartSelectionForm.ROLE_FIELDS):
        if name in query:
            data[name] = query.get(name, "")
    return ChartSelectionForm(data, schema=schema)


def _role_controls(chart_type: str, schema: ColumnSchema, form: ChartSelectionForm) -> list[dict[str, object]]:
    """Describe the role selects for a chart type, disabling wrong-kind columns."""

    offered = column_options(chart_type, schema)
    controls: list[dict[str, object]] = []
    for slot in role_slots(chart_type):
        allowed = set(offered.get(slot.name, ()))
        controls.append(
            {
                "name": slot.name,
                "label": slot.label,
                "kind": slot.kind,
                "selected": form.data.get(slot.name) or "",
                "options": [{"value": key, "enabled": key in allowed} for key in schema.keys],
            }
        )
    return controls


def index(request: HttpRequest) -> HttpResponse:
    """Render the landing page."""

    return render(request, "core/index.html", {"samples": list_samples()})


def visualizer(request: HttpRequest) -> HttpResponse:
    """Upload a dataset and select a chart for it.

    POST loads a file. GET renders the dataset with the chart selected by the
    query string (chart type plus role slots).
    """

    dataset_session = _visualizer_session(request)
    if request.method == "POST":
        _handle_upload(request, dataset_session)
        return redirect("core:visualizer")

    dataset = dataset_session.current()
    context: dict[str, object] = {
        "upload_form": DatasetUploadForm(),
        "sample_form": SampleDatasetForm(),
        "dataset": dataset,
    }
    if dataset is None:
        return render(request, "core/visualizer.html", context)

    schema = classify_columns(dataset.rows)
    form = _chart_selection_form(request.GET, schema)
    chart: ChartDataset | None = None
    chart_errors: tuple[str, ...] = ()
    chart_type = "table"
    if form.is_valid():
        chart_type = str(form.cleaned_data["chart_type"])
        try:
            chart = build_chart_dataset(dataset, chart_type=chart_type, selection=form.selection())  # type: ignore[arg-type]
        except ConfigurationError as exc:
            chart_errors = exc.errors or (str(exc),)
    else:
        chart_errors = ("Please select the appropriate fields to display the chart.",)

    available = set(available_chart_types(schema))
    context.update(
        {
            "schema": schema,
            "chart_form": form,
            "chart_type": chart_type,
            "chart_type_label": CHART_TYPE_LABELS.get(chart_type, chart_type),  # type: ignore[call-overload]
            "chart_menu": [
                {"value": value, "label": CHART_TYPE_LABELS[value], "available": value in available}
                for value in CHART_TYPES
            ],
            "role_controls": _role_controls(chart_type, schema, form),
            "chart": chart,
            "chart_payload": chart.as_json() if chart is not None else None,
            "chart_errors": chart_errors,
            "preview_rows": dataset.rows[: int(settings.DATAVISION_PREVIEW_ROWS)],
        }
    )
    return render(request, "core/visualizer.html", context)


@require_POST
def visualizer_sample(request: HttpRequest) -> HttpResponse:
    """Load a bundled sample into the visualizer."""

    _handle_sample(request, _visualizer_session(request))
    return redirect("core:visualizer")


@require_POST
def visualizer_reset(request: HttpRequest) -> HttpResponse:
    """Clear the visualizer dataset."""

    _visualizer_session(request).clear()
    return redirect("core:visualizer")


@require_GET
def chart_data_api(request: HttpRequest) -> JsonResponse:
    """Return the chart-ready dataset for the visualizer selection as JSON."""

    dataset = _visualizer_session(request).current()
    if dataset is None:
        return JsonResponse({"ok": False, "error": "No dataset loaded.", "errors": []}, status=404)

    schema = classify_columns(dataset.rows)
    form = _chart_selection_form(request.GET, schema)
    if not form.is_valid():
        errors = [f"{field}: {error}" for field, field_errors in form.errors.items() for error in field_errors]
        return JsonResponse({"ok": False, "error": "Invalid chart selection.", "errors": errors}, status=400)

    try:
        chart = build_chart_dataset(
            dataset,
            chart_type=form.cleaned_data["chart_type"],
            selection=form.selection(),
        )
    except ConfigurationError as exc:
        return JsonResponse({"ok": False, "error": str(exc), "errors": list(exc.errors)}, status=400)
    return JsonResponse({"ok": True, **chart.as_json()})


def refine_data(request: HttpRequest) -> HttpResponse:
    """Upload a dataset and apply refinement steps to it."""

    dataset_session = _refine_session(request)
    if request.method == "POST" and request.POST.get("action") != "refine":
        _handle_upload(request, dataset_session)
        return redirect("core:refine_data")

    dataset = dataset_session.current()
    headers = dataset.headers if dataset is not None else ()

    if request.method == "POST":
        form = RefinementForm(request.POST, headers=headers)
        if dataset is None:
            messages.error(request, "Upload a dataset before applying refinements.")
        elif form.is_valid():
            refine_dataset(
                dataset_session,
                options=form.options(),
                case_rules=form.cleaned_data["case_rules"],
                rename_map=form.rename_map(),
            )
            messages.success(request, "Applied selected transformations.")
            return redirect("core:refine_data")
    else:
        form = RefinementForm(headers=headers)

    refined = dataset_session.refined_rows()
    if refined is None and dataset is not None:
        refined = dataset.rows
    preview_limit = int(settings.DATAVISION_PREVIEW_ROWS)
    refined_rows = refined or []
    context = {
        "upload_form": DatasetUploadForm(),
        "sample_form": SampleDatasetForm(),
        "dataset": dataset,
        "refine_form": form,
        "rename_fields": [form[name] for name in form.rename_field_names()],
        "original_preview": dataset.rows[:preview_limit] if dataset is not None else [],
        "refined_headers": list(refined_rows[0].keys()) if refined_rows else [],
        "refined_preview": refined_rows[:preview_limit],
        "refined_count": len(refined_rows),
    }
    return render(request, "core/refine.html", context)


@require_POST
def refine_sample(request: HttpRequest) -> HttpResponse:
    """Load a bundled sample into the refinement workflow."""

    _handle_sample(request, _refine_session(request))
    return redirect("core:refine_data")


@require_GET
def export_refined_csv(request: HttpRequest) -> HttpResponse:
    """Download the refined dataset as CSV."""

    dataset_session = _refine_session(request)
    dataset = dataset_session.current()
    if dataset is None:
        return HttpResponse(
            "No dataset is loaded. Upload a file and try again.\n",
            content_type="text/plain; charset=utf-8",
            status=400,
        )

    rows = dataset_session.refined_rows()
    if rows is None:
        rows = dataset.rows
    response = HttpResponse(rows_to_csv(rows), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{export_filename(dataset.name)}"'
    return response


@require_GET
def sample_file(request: HttpRequest, slug: str) -> HttpResponse:
    """Serve the raw content of a bundled sample dataset."""

    sample = get_sample(slug)
    if sample is None:
        raise Http404("Unknown sample dataset.")
    return HttpResponse(read_sample(sample), content_type=f"{sample.content_type}; charset=utf-8")
