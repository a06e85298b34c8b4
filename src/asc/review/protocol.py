"""Agent review round-trip and merge policy.

Outcomes:

- ``applied``: decisions are merged by ``itemIndex``; items without a
  decision keep their classification.
- ``skipped``: nothing to do. An empty suspicious list short-circuits here and
  the transport is never called.
- ``warning``: valid decisions are merged, unknown or duplicate ``itemIndex``
  values are ignored and reported.
- ``error``: the call failed, timed out, was cancelled or returned a malformed
  payload. Nothing is merged.

Neither ``warning`` nor ``error`` invalidates the existing classification.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import requests
from pydantic import ValidationError

from asc.classifier.types import ClassifiedLine, LineType
from asc.logging_setup import get_logger, log_call
from asc.review.contracts import (
    AgentReviewRequestPayload,
    AgentReviewResponsePayload,
    ReviewStatus,
    error_response,
    skipped_response,
)

log = get_logger(__name__)

ReviewTransport = Callable[[dict[str, Any]], Any]

# Failures a transport may raise that count as a failed round-trip.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (requests.RequestException, OSError, ValueError)


@dataclass
class AppliedDecision:
    """A decision that overwrote a classified line."""

    item_index: int
    line_index: int
    previous_type: LineType
    final_type: LineType
    confidence: float
    reason: str


@dataclass
class MergeOutcome:
    """Caller-visible result of merging one review response."""

    status: ReviewStatus
    message: str = ""
    model: str = ""
    latency_ms: float = 0
    applied: list[AppliedDecision] = field(default_factory=list)
    ignored_items: list[int] = field(default_factory=list)
    missing_items: list[int] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.perf_counter() - start) * 1000))


def parse_review_response(raw: Any) -> AgentReviewResponsePayload:
    """Validate a response body; malformed input becomes an ``error`` response."""
    if isinstance(raw, AgentReviewResponsePayload):
        return raw
    try:
        if isinstance(raw, (str, bytes)):
            return AgentReviewResponsePayload.model_validate_json(raw)
        return AgentReviewResponsePayload.model_validate(raw)
    except ValidationError as exc:
        log.warning("Malformed review response: %d validation error(s)", exc.error_count())
        return error_response(f"malformed review response: {exc.error_count()} validation error(s)")


def merge_review_response(
    lines: Sequence[ClassifiedLine],
    request: AgentReviewRequestPayload,
    response: AgentReviewResponsePayload,
) -> MergeOutcome:
    """Merge ``response`` into ``lines`` according to the review policy.

    Args:
        lines: The run's classified lines (mutated in place for valid decisions).
        request: The request the response answers; decisions are resolved
            through its ``itemIndex`` values only.
        response: Validated reviewer response.

    Returns:
        :class:`MergeOutcome` with the status the caller should surface.
    """
    outcome = MergeOutcome(
        status=response.status,
        message=response.message,
        model=response.model,
        latency_ms=response.latency_ms,
    )
    if response.status in (ReviewStatus.SKIPPED, ReviewStatus.ERROR):
        return outcome

    by_line = {line.line_index: line for line in lines}
    seen: set[int] = set()
    for decision in response.decisions:
        item = request.item(decision.item_index)
        line = by_line.get(item.line_index) if item is not None else None
        if item is None or line is None or decision.item_index in seen or line.reviewed:
            outcome.ignored_items.append(decision.item_index)
            continue
        seen.add(decision.item_index)
        previous = line.assigned_type
        line.apply_review(decision.final_type, decision.confidence, decision.reason)
        outcome.applied.append(
            AppliedDecision(
                item_index=decision.item_index,
                line_index=line.line_index,
                previous_type=previous,
                final_type=decision.final_type,
                confidence=line.confidence,
                reason=decision.reason,
            )
        )

    outcome.missing_items = [item.item_index for item in request.suspicious_lines if item.item_index not in seen]
    if outcome.ignored_items:
        outcome.status = ReviewStatus.WARNING
        note = f"ignored decisions for unknown or repeated items {outcome.ignored_items}"
        outcome.message = f"{outcome.message}; {note}" if outcome.message else note
        log.warning("Review %s: %s", request.session_id, note)
    log.info(
        "Review %s merged: status=%s applied=%d missing=%d",
        request.session_id,
        outcome.status.value,
        len(outcome.applied),
        len(outcome.missing_items),
    )
    return outcome


@log_call()
def request_review(request: AgentReviewRequestPayload, transport: ReviewTransport) -> AgentReviewResponsePayload:
    """Send ``request`` through ``transport`` and return a validated response.

    Transport failures are turned into ``error`` responses; this function does
    not retry.
    """
    if not request.suspicious_lines:
        log.info("Review %s skipped: no suspicious lines", request.session_id)
        return skipped_response()
    start = time.perf_counter()
    try:
        raw = transport(request.to_wire())
    except TRANSPORT_ERRORS as exc:
        log.warning("Review %s failed: %s", request.session_id, exc)
        return error_response(f"review call failed: {exc}", latency_ms=_elapsed_ms(start))
    response = parse_review_response(raw)
    if response.latency_ms == 0:
        response = response.model_copy(update={"latency_ms": _elapsed_ms(start)})
    return response


async def request_review_async(
    request: AgentReviewRequestPayload,
    transport: ReviewTransport,
    timeout_s: float | None = None,
    propagate_cancel: bool = False,
) -> AgentReviewResponsePayload:
    """Awaitable :func:`request_review` with a timeout.

    Timeout and cancellation resolve to an ``error`` response so callers can
    keep the classification they already have. With ``propagate_cancel`` the
    cancellation is logged and re-raised instead, which lets an orchestrator
    stop without treating it as a failed attempt.
    """
    if not request.suspicious_lines:
        return skipped_response()
    start = time.perf_counter()
    try:
        return await asyncio.wait_for(asyncio.to_thread(request_review, request, transport), timeout=timeout_s)
    except asyncio.TimeoutError:
        log.warning("Review %s timed out after %ss", request.session_id, timeout_s)
        return error_response(f"review timed out after {timeout_s}s", latency_ms=_elapsed_ms(start))
    except asyncio.CancelledError:
        log.warning("Review %s cancelled", request.session_id)
        if propagate_cancel:
            raise
        return error_response("review cancelled", latency_ms=_elapsed_ms(start))
