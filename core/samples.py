"""Bundled sample datasets.

Samples are described by `manifest.yaml` in the sample data directory and are
loaded through the same parser entry point as uploaded files.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml
from django.conf import settings


@dataclass(frozen=True, slots=True)
class SampleDataset:
    """A bundled dataset entry.

    Attributes:
        slug: Stable identifier used in URLs and forms.
        label: Display label.
        file_name: File name within the sample directory.
        content_type: MIME type used to pick the parser.
    """

    slug: str
    label: str
    file_name: str
    content_type: str


def sample_data_dir() -> Path:
    """Return the configured sample data directory."""

    return Path(settings.DATAVISION_SAMPLE_DATA_DIR)


def list_samples(*, directory: Path | None = None) -> tuple[SampleDataset, ...]:
    """Return the samples declared in the manifest.

    Args:
        directory: Optional sample directory override.

    Returns:
        SampleDataset entries in manifest order.

    Raises:
        ValueError: When a manifest entry is missing a required key.
    """

    base = directory or sample_data_dir()
    payload = yaml.safe_load((base / "manifest.yaml").read_text(encoding="utf-8")) or {}

    samples: list[SampleDataset] = []
    for idx, entry in enumerate(payload.get("samples") or []):
        missing = [key for key in ("slug", "label", "file", "content_type") if not entry.get(key)]
        if missing:
            raise ValueError(f"Sample manifest entry {idx} is missing: {', '.join(missing)}.")
        samples.append(
            SampleDataset(
                slug=str(entry["slug"]),
                label=str(entry["label"]),
                file_name=str(entry["file"]),
                content_type=str(entry["content_type"]),
            )
        )
    return tuple(samples)


def get_sample(slug: str, *, directory: Path | None = None) -> SampleDataset | None:
    """Return the sample with `slug`, or None when it is not declared."""

    for sample in list_samples(directory=directory):
        if sample.slug == slug:
            return sample
    return None


def read_sample(sample: SampleDataset, *, directory: Path | None = None) -> str:
    """Return the raw text content of a sample dataset."""

    base = directory or sample_data_dir()
    return (base / sample.file_name).read_text(encoding="utf-8")
