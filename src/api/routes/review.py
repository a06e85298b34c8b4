"""Review merge endpoint.

Implements:
- POST /review/merge: merge a reviewer response into a fresh classification

The classification is deterministic, so re-classifying the same text yields
the same ``itemIndex`` assignment the original request carried.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.deps import get_settings
from asc.classifier.line_classifier import LineClassifier
from asc.classifier.normalize import LineNormalizer
from asc.config import AscSettings
from asc.review.aggregator import SuspicionAggregator
from asc.review.protocol import merge_review_response, parse_review_response

router = APIRouter()


class MergeRequest(BaseModel):
    """Text that was reviewed, its session id and the raw reviewer response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str
    session_id: str
    response: Any


@router.post("/review/merge")
def merge_review(body: MergeRequest, settings: AscSettings = Depends(get_settings)) -> dict[str, Any]:  # noqa: B008
    """Apply the reviewer response and return the merged lines with the outcome."""
    run = LineClassifier(settings.classifier, LineNormalizer(settings.normalizer)).classify(body.text)
    request = SuspicionAggregator(settings.aggregator).build_request(run.lines, session_id=body.session_id)
    outcome = merge_review_response(run.lines, request, parse_review_response(body.response))
    return {
        "status": outcome.status.value,
        "message": outcome.message,
        "applied": [d.item_index for d in outcome.applied],
        "ignored": outcome.ignored_items,
        "lines": [line.to_dict() for line in run.lines],
    }
