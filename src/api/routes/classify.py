"""Classification endpoint.

Implements:
- POST /classify: classify raw text and return lines plus the review request
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_settings
from asc.classifier.line_classifier import LineClassifier
from asc.classifier.normalize import LineNormalizer
from asc.config import AscSettings
from asc.review.aggregator import SuspicionAggregator

router = APIRouter()


class ClassifyRequest(BaseModel):
    """Request body for ``POST /classify``.

    Attributes:
        text (str): Raw extracted text, one screenplay line per line.
        session_id (str | None): Optional review session id to reuse.
    """

    text: str = Field(max_length=2_000_000)
    session_id: str | None = None


class ClassifyResponse(BaseModel):
    """Classified lines, per-type counts and the review request payload."""

    lines: list[dict[str, Any]]
    counts: dict[str, int]
    review_request: dict[str, Any]


@router.post("/classify", response_model=ClassifyResponse)
def classify(body: ClassifyRequest, settings: AscSettings = Depends(get_settings)) -> ClassifyResponse:  # noqa: B008
    """Classify ``body.text`` without contacting the review service."""
    classifier = LineClassifier(settings.classifier, LineNormalizer(settings.normalizer))
    run = classifier.classify(body.text)
    request = SuspicionAggregator(settings.aggregator).build_request(run.lines, session_id=body.session_id)
    return ClassifyResponse(
        lines=[line.to_dict() for line in run.lines],
        counts=run.counts(),
        review_request=request.to_wire(),
    )
