"""Session-scoped dataset state.

Each workflow (visualizer, refinement) owns exactly one loaded dataset at a
time. The dataset lives in the Django session under a workflow namespace and
is replaced as a whole; it is never partially updated.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Final, Literal

Workflow = Literal["visualizer", "refine"]

SESSION_KEY_PREFIX: Final[str] = "datavision"

Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class LoadedDataset:
    """A dataset held in the session.

    Attributes:
        name: Source file name.
        file_format: Parser used ("csv" or "json").
        rows: Parsed rows.
        skipped_rows: Number of CSV lines skipped while parsing.
    """

    name: str
    file_format: str
    rows: list[Row]
    skipped_rows: int = 0

    @property
    def headers(self) -> tuple[str, ...]:
        """Return the column keys of the first row."""

        if not self.rows:
            return ()
        return tuple(self.rows[0].keys())


class DatasetSession:
    """Explicit owner of a workflow's dataset state.

    Args:
        session: Request session (or any mutable mapping in tests).
        workflow: Workflow namespace.
    """

    def __init__(self, session: MutableMapping[str, Any], *, workflow: Workflow) -> None:
        self._session = session
        self.workflow = workflow

    @property
    def _dataset_key(self) -> str:
        return f"{SESSION_KEY_PREFIX}:{self.workflow}:dataset"

    @property
    def _refined_key(self) -> str:
        return f"{SESSION_KEY_PREFIX}:{self.workflow}:refined"

    def current(self) -> LoadedDataset | None:
        """Return the loaded dataset, or None when nothing is loaded."""

        payload = self._session.get(self._dataset_key)
        if not payload:
            return None
        return LoadedDataset(
            name=str(payload.get("name") or ""),
            file_format=str(payload.get("file_format") or ""),
            rows=list(payload.get("rows") or []),
            skipped_rows=int(payload.get("skipped_rows") or 0),
        )

    def replace(self, dataset: LoadedDataset) -> None:
        """Replace the loaded dataset and discard state derived from it."""

        self._session[self._dataset_key] = {
            "name": dataset.name,
            "file_format": dataset.file_format,
            "rows": dataset.rows,
            "skipped_rows": dataset.skipped_rows,
        }
        self._session.pop(self._refined_key, None)
        self._mark_modified()

    def clear(self) -> None:
        """Forget the loaded dataset and any refined rows."""

        self._session.pop(self._dataset_key, None)
        self._session.pop(self._refined_key, None)
        self._mark_modified()

    def refined_rows(self) -> list[Row] | None:
        """Return refined rows, or None when no refinement has been applied."""

        rows = self._session.get(self._refined_key)
        if rows is None:
            return None
        return list(rows)

    def store_refined_rows(self, rows: list[Row]) -> None:
        """Store the output of the latest refinement run."""

        self._session[self._refined_key] = rows
        self._mark_modified()

    def _mark_modified(self) -> None:
        if hasattr(self._session, "modified"):
            self._session.modified = True  # type: ignore[attr-defined]
