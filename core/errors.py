"""Exception types raised while loading and charting datasets."""

from __future__ import annotations

from collections.abc import Iterable


class DataVisionError(Exception):
    """Base class for dataset loading and charting failures."""


class UnsupportedFileType(DataVisionError):
    """Raised when an upload is neither CSV nor JSON."""


class FormatError(DataVisionError):
    """Raised when content cannot be interpreted as its declared format."""


class ConfigurationError(DataVisionError):
    """Raised when a chart cannot be built from the selected roles.

    Args:
        message: Summary shown in place of the chart.
        errors: Individual validation errors.
    """

    def __init__(self, message: str, *, errors: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.errors: tuple[str, ...] = tuple(errors)
