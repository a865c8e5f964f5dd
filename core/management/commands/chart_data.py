"""Print the chart-ready dataset for a local CSV/JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from core.charting.builder import RoleSelection, build_chart_roles
from core.charting.reshape import reshape
from core.charting.schema import CHART_TYPES
from core.errors import ConfigurationError, FormatError, UnsupportedFileType
from core.parsers.tabular import parse_tabular, sniff_file_format


class Command(BaseCommand):
    """Parse a dataset file and emit the reshaped chart data as JSON."""

    help = "Parse a CSV/JSON file and print the chart-ready dataset for a chart type and role selection."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Path to a .csv or .json file.")
        parser.add_argument("--chart-type", default="table", choices=CHART_TYPES, help="Chart type to build.")
        parser.add_argument("--x", dest="x_axis", default=None, help="Column for the x axis.")
        parser.add_argument("--y", dest="y_axis", default=None, help="Column for the y axis.")
        parser.add_argument("--z", dest="z_axis", default=None, help="Column for the bubble size.")
        parser.add_argument("--group", dest="group_key", default=None, help="Column whose values become series.")
        parser.add_argument("--value", dest="value_key", default=None, help="Column for heatmap cell values.")
        parser.add_argument("--indent", type=int, default=None, help="Optional JSON indent.")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path = Path(options["path"])
        try:
            content = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise CommandError(f"Could not read {path}: {exc}") from exc

        try:
            parsed = parse_tabular(content, file_format=sniff_file_format(path.name, None))
        except (UnsupportedFileType, FormatError) as exc:
            raise CommandError(str(exc)) from exc

        for skipped in parsed.skipped_rows:
            self.stderr.write(
                f"Skipped line {skipped.line_number}: {skipped.actual_fields} fields, "
                f"expected {skipped.expected_fields}."
            )

        chart_type = options["chart_type"]
        selection = RoleSelection(
            x_axis=options["x_axis"],
            y_axis=options["y_axis"],
            z_axis=options["z_axis"],
            group_key=options["group_key"],
            value_key=options["value_key"],
        )
        try:
            chart = reshape(parsed.rows, chart_type, build_chart_roles(chart_type, selection))
        except ConfigurationError as exc:
            details = "; ".join(exc.errors) or str(exc)
            raise CommandError(details) from exc

        for warning in chart.warnings:
            self.stderr.write(f"Warning: {warning}")
        self.stdout.write(json.dumps(chart.as_json(), indent=options["indent"], ensure_ascii=False))
        return None
