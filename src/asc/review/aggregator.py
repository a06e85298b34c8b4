"""Collect suspicious lines into an agent review request.

The aggregator walks a run's classified lines once, in document order. Every
line that crosses the suspicion threshold (or falls under the confidence
floor) becomes one :class:`AgentSuspiciousLinePayload` with a dense
``itemIndex`` and a snapshot of its neighbours.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from asc.classifier.types import ClassifiedLine, is_suspicious
from asc.logging_setup import get_logger
from asc.review.contracts import (
    AgentReviewContextLine,
    AgentReviewRequestPayload,
    AgentSuspiciousLinePayload,
)

log = get_logger(__name__)


@dataclass
class AggregatorConfig:
    """Configuration for :class:`SuspicionAggregator`."""

    suspicion_threshold: int = 60
    confidence_floor: float = 0.5
    context_radius: int = 5
    # Upper bound on the share of lines sent for review; None keeps all.
    max_suspicious_ratio: float | None = None
    max_text_len: int = 2000

    def __post_init__(self) -> None:
        if self.context_radius < 0:
            raise ValueError("context_radius must be >= 0")
        if self.max_suspicious_ratio is not None and not 0 < self.max_suspicious_ratio <= 1:
            raise ValueError("max_suspicious_ratio must be in (0, 1]")


class SuspicionAggregator:
    """Build :class:`AgentReviewRequestPayload` objects from classified lines."""

    def __init__(self, config: AggregatorConfig | None = None) -> None:
        self.cfg = config or AggregatorConfig()

    def is_suspicious(self, line: ClassifiedLine) -> bool:
        return is_suspicious(line, self.cfg.suspicion_threshold, self.cfg.confidence_floor)

    def select(self, lines: Sequence[ClassifiedLine]) -> list[int]:
        """Return positions (into ``lines``) of the lines to submit, in document order."""
        picked = [pos for pos, line in enumerate(lines) if self.is_suspicious(line)]
        ratio = self.cfg.max_suspicious_ratio
        if ratio is not None and lines:
            limit = max(1, math.floor(ratio * len(lines)))
            if len(picked) > limit:
                ranked = sorted(
                    picked,
                    key=lambda pos: (-lines[pos].total_suspicion, lines[pos].confidence, pos),
                )
                picked = sorted(ranked[:limit])
        return picked

    def build_request(
        self,
        lines: Sequence[ClassifiedLine],
        session_id: str | None = None,
    ) -> AgentReviewRequestPayload:
        """Return the review request for one run (the suspicious list may be empty)."""
        items: list[AgentSuspiciousLinePayload] = []
        for item_index, pos in enumerate(self.select(lines)):
            line = lines[pos]
            items.append(
                AgentSuspiciousLinePayload(
                    item_index=item_index,
                    line_index=line.line_index,
                    text=self._clip(line.text),
                    assigned_type=line.assigned_type,
                    total_suspicion=line.total_suspicion,
                    reasons=line.reasons,
                    context_lines=self._context(lines, pos),
                )
            )
        request = AgentReviewRequestPayload(
            session_id=session_id or uuid.uuid4().hex,
            total_reviewed=len(lines),
            suspicious_lines=items,
        )
        log.info(
            "Review request %s: %d of %d lines suspicious",
            request.session_id,
            len(items),
            len(lines),
        )
        return request

    def _context(self, lines: Sequence[ClassifiedLine], pos: int) -> list[AgentReviewContextLine]:
        radius = self.cfg.context_radius
        lo = max(0, pos - radius)
        hi = min(len(lines), pos + radius + 1)
        return [
            AgentReviewContextLine(
                line_index=lines[i].line_index,
                assigned_type=lines[i].assigned_type,
                text=self._clip(lines[i].text),
            )
            for i in range(lo, hi)
            if i != pos
        ]

    def _clip(self, text: str) -> str:
        limit = self.cfg.max_text_len
        return text if len(text) <= limit else text[: limit - 1] + "…"


def build_review_request(
    lines: Sequence[ClassifiedLine],
    config: AggregatorConfig | None = None,
) -> AgentReviewRequestPayload:
    """Functional wrapper around :meth:`SuspicionAggregator.build_request`."""
    return SuspicionAggregator(config).build_request(lines)
