"""Service-layer functions for the core app.

Services coordinate session state with the pure parsing and charting modules.
A load either fully replaces the session dataset or leaves it untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from analysis.refinement import CaseRule, RefinementOptions, refine_rows
from analysis.schema import classify_columns
from core.charting.builder import RoleSelection, build_chart_roles
from core.charting.reshape import ChartDataset, reshape
from core.charting.schema import ChartType
from core.errors import ConfigurationError, FormatError, UnsupportedFileType
from core.parsers.tabular import ParsedTable, parse_tabular, sniff_file_format
from core.samples import SampleDataset, read_sample
from core.session import DatasetSession, LoadedDataset, Row

logger = logging.getLogger(__name__)


def load_dataset(
    dataset_session: DatasetSession,
    *,
    file_name: str,
    content_type: str | None,
    content: str,
) -> tuple[LoadedDataset, ParsedTable]:
    """Parse uploaded content and make it the session's dataset.

    Args:
        dataset_session: Workflow state to update.
        file_name: Client-provided file name.
        content_type: Client-provided MIME type.
        content: Decoded file text.

    Returns:
        A tuple of (loaded_dataset, parsed_table).

    Raises:
        UnsupportedFileType: When the upload is neither CSV nor JSON.
        FormatError: When the content cannot be parsed. The session dataset is
            left unchanged.
    """

    try:
        file_format = sniff_file_format(file_name, content_type)
        parsed = parse_tabular(content, file_format=file_format)
    except (UnsupportedFileType, FormatError) as exc:
        logger.warning("Rejected %s for %s workflow: %s", file_name, dataset_session.workflow, exc)
        raise

    dataset = LoadedDataset(
        name=file_name,
        file_format=file_format,
        rows=parsed.rows,
        skipped_rows=len(parsed.skipped_rows),
    )
    dataset_session.replace(dataset)
    logger.info(
        "Loaded %s into %s workflow: %d rows, %d skipped.",
        file_name,
        dataset_session.workflow,
        len(parsed.rows),
        len(parsed.skipped_rows),
    )
    return dataset, parsed


def load_sample_dataset(dataset_session: DatasetSession, sample: SampleDataset) -> tuple[LoadedDataset, ParsedTable]:
    """Load a bundled sample through the regular parser entry point."""

    return load_dataset(
        dataset_session,
        file_name=sample.file_name,
        content_type=sample.content_type,
        content=read_sample(sample),
    )


def build_chart_dataset(
    dataset: LoadedDataset,
    *,
    chart_type: ChartType,
    selection: RoleSelection,
) -> ChartDataset:
    """Reshape a loaded dataset for a chart selection.

    Raises:
        ConfigurationError: When the selection cannot produce a chart.
    """

    roles = build_chart_roles(chart_type, selection)
    try:
        return reshape(dataset.rows, chart_type, roles)
    except ConfigurationError:
        schema = classify_columns(dataset.rows)
        logger.debug(
            "Chart %s not built for %s (numeric=%s, categorical=%s).",
            chart_type,
            dataset.name,
            schema.numeric_keys,
            schema.categorical_keys,
        )
        raise


def refine_dataset(
    dataset_session: DatasetSession,
    *,
    options: RefinementOptions,
    case_rules: Sequence[CaseRule],
    rename_map: Mapping[str, str],
) -> list[Row]:
    """Run the refinement pipeline on the session dataset and store the result.

    Returns:
        The refined rows (empty when no dataset is loaded).
    """

    dataset = dataset_session.current()
    if dataset is None:
        return []
    refined = refine_rows(dataset.rows, options, case_rules, rename_map)
    dataset_session.store_refined_rows(refined)
    logger.info("Refined %s: %d rows in, %d rows out.", dataset.name, len(dataset.rows), len(refined))
    return refined
