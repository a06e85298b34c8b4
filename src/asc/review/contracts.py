"""Wire models for the agent review round-trip.

Field names on the wire are camelCase (``itemIndex``, ``latencyMs``...);
Python code uses the snake_case attribute names. ``assignedType`` and
``finalType`` only accept the nine :class:`LineType` values.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from asc.classifier.types import LineType


class ReviewStatus(str, enum.Enum):
    """Outcome of a review round-trip."""

    APPLIED = "applied"
    SKIPPED = "skipped"
    WARNING = "warning"
    ERROR = "error"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class AgentReviewContextLine(_WireModel):
    """Snapshot of a neighbouring line sent for context."""

    line_index: int = Field(ge=0)
    assigned_type: LineType
    text: str


class AgentSuspiciousLinePayload(_WireModel):
    """One line submitted for review."""

    item_index: int = Field(ge=0)
    line_index: int = Field(ge=0)
    text: str
    assigned_type: LineType
    total_suspicion: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    context_lines: list[AgentReviewContextLine] = Field(default_factory=list)


class AgentReviewRequestPayload(_WireModel):
    """Review request for one classification run."""

    session_id: str = Field(min_length=1)
    total_reviewed: int = Field(ge=0)
    suspicious_lines: list[AgentSuspiciousLinePayload] = Field(default_factory=list)

    def item(self, item_index: int) -> AgentSuspiciousLinePayload | None:
        if 0 <= item_index < len(self.suspicious_lines):
            return self.suspicious_lines[item_index]
        return None


class AgentReviewDecision(_WireModel):
    """Reviewer verdict for one submitted item."""

    item_index: int = Field(ge=0)
    final_type: LineType
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str = ""


class AgentReviewResponsePayload(_WireModel):
    """Reviewer response for one request."""

    status: ReviewStatus
    model: str = ""
    decisions: list[AgentReviewDecision] = Field(default_factory=list)
    message: str = ""
    latency_ms: float = Field(default=0, ge=0)


def skipped_response(message: str = "No suspicious lines to review") -> AgentReviewResponsePayload:
    return AgentReviewResponsePayload(status=ReviewStatus.SKIPPED, message=message)


def error_response(message: str, latency_ms: float = 0, model: str = "") -> AgentReviewResponsePayload:
    return AgentReviewResponsePayload(
        status=ReviewStatus.ERROR,
        model=model,
        message=message,
        latency_ms=max(0, latency_ms),
    )
