"""Run the refinement pipeline over a local CSV/JSON file."""

from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from analysis.csv_export import rows_to_csv
from analysis.refinement import CASE_MODES, CaseRule, RefinementOptions, default_rename_map, refine_rows
from core.errors import FormatError, UnsupportedFileType
from core.parsers.tabular import parse_tabular, sniff_file_format


class Command(BaseCommand):
    """Refine a dataset file and print it as CSV."""

    help = "Refine a CSV/JSON file (trim, drop empty/duplicate rows, change case, rename) and print CSV."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Path to a .csv or .json file.")
        parser.add_argument("--no-trim", action="store_true", help="Keep surrounding whitespace in text cells.")
        parser.add_argument("--remove-nulls", action="store_true", help="Drop rows with empty cells.")
        parser.add_argument("--remove-duplicates", action="store_true", help="Drop repeated rows.")
        parser.add_argument(
            "--case",
            action="append",
            default=[],
            metavar="COLUMN:MODE",
            help=f"Case rule; MODE is one of {', '.join(CASE_MODES)}. Repeatable.",
        )
        parser.add_argument(
            "--rename",
            action="append",
            default=[],
            metavar="OLD:NEW",
            help="Rename a column. Repeatable.",
        )
        parser.add_argument(
            "--output",
            default=None,
            help="Optional output path; defaults to stdout.",
        )

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

        case_rules: list[CaseRule] = []
        for raw in options["case"]:
            column, sep, mode = raw.rpartition(":")
            if not sep or not column:
                raise CommandError(f"Invalid --case value {raw!r}; expected COLUMN:MODE.")
            try:
                case_rules.append(CaseRule(column=column, mode=mode.strip().lower()))  # type: ignore[arg-type]
            except ValueError as exc:
                raise CommandError(str(exc)) from exc

        rename_map = default_rename_map(parsed.headers)
        for raw in options["rename"]:
            old, sep, new = raw.partition(":")
            if not sep or old not in rename_map or not new:
                raise CommandError(f"Invalid --rename value {raw!r}; expected an existing OLD:NEW.")
            rename_map[old] = new

        refined = refine_rows(
            parsed.rows,
            RefinementOptions(
                trim_whitespace=not options["no_trim"],
                remove_nulls=options["remove_nulls"],
                remove_duplicates=options["remove_duplicates"],
            ),
            case_rules,
            rename_map,
        )
        csv_text = rows_to_csv(refined)

        output = options["output"]
        if output:
            Path(output).write_text(csv_text + "\n" if csv_text else "", encoding="utf-8")
            self.stdout.write(f"Wrote {len(refined)} rows to {output}.")
        else:
            self.stdout.write(csv_text)
        return None
