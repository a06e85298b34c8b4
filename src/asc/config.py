"""Settings schema and loader.

Settings come from an optional YAML file with one section per component::

    classifier:
      window_size: 10
    aggregator:
      suspicion_threshold: 60
      context_radius: 5
    review:
      base_url: http://localhost:3000
      timeout_s: 30

Environment variables override the file: ``ASC_REVIEW_URL``,
``ASC_REVIEW_API_KEY``, ``ASC_REVIEW_TIMEOUT``, ``ASC_REVIEW_RETRIES`` and
``ASC_SUSPICION_THRESHOLD``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from asc.classifier.line_classifier import ClassifierConfig
from asc.classifier.normalize import NormalizerConfig
from asc.review.aggregator import AggregatorConfig
from asc.review.client import ReviewClientConfig

__all__ = ["AscSettings", "load_settings"]


@dataclass
class AscSettings:
    """All component configurations in one place."""

    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    aggregator: AggregatorConfig = field(default_factory=AggregatorConfig)
    review: ReviewClientConfig = field(default_factory=ReviewClientConfig)


def _section(cls: type, data: Any, name: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown keys in '{name}': {', '.join(unknown)}")
    return cls(**data)


def _env_overrides(settings: AscSettings) -> None:
    url = os.getenv("ASC_REVIEW_URL")
    if url:
        settings.review.base_url = url
    api_key = os.getenv("ASC_REVIEW_API_KEY")
    if api_key:
        settings.review.api_key = api_key
    try:
        if os.getenv("ASC_REVIEW_TIMEOUT"):
            settings.review.timeout_s = float(os.environ["ASC_REVIEW_TIMEOUT"])
        if os.getenv("ASC_REVIEW_RETRIES"):
            settings.review.max_retries = int(os.environ["ASC_REVIEW_RETRIES"])
        if os.getenv("ASC_SUSPICION_THRESHOLD"):
            settings.aggregator.suspicion_threshold = int(os.environ["ASC_SUSPICION_THRESHOLD"])
    except ValueError as exc:
        raise ValueError(f"invalid numeric environment override: {exc}") from exc


def load_settings(path: str | Path | None = None) -> AscSettings:
    """Load :class:`AscSettings` from YAML (optional) plus environment overrides.

    Args:
        path: Path to a settings YAML file, or None for defaults.

    Returns:
        Parsed :class:`AscSettings` instance.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist.
        ValueError: If the file is not valid YAML, or a section is malformed
            or has unknown keys.
    """

    data: dict[str, Any] = {}
    if path is not None:
        src = Path(path)
        try:
            data = yaml.safe_load(src.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid YAML in {src.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{src.name} must contain a mapping")
    unknown = sorted(set(data) - {"normalizer", "classifier", "aggregator", "review"})
    if unknown:
        raise ValueError(f"unknown sections: {', '.join(unknown)}")
    settings = AscSettings(
        normalizer=_section(NormalizerConfig, data.get("normalizer"), "normalizer"),
        classifier=_section(ClassifierConfig, data.get("classifier"), "classifier"),
        aggregator=_section(AggregatorConfig, data.get("aggregator"), "aggregator"),
        review=_section(ReviewClientConfig, data.get("review"), "review"),
    )
    _env_overrides(settings)
    return settings
