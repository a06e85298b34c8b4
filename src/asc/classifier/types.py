"""Shared types for the screenplay line classifier.

Confidence is always a float in ``[0, 1]``. Suspicion scores are integers in
``[0, 99]``; a line's total is the strongest finding plus a damped share of
the others so that many weak hints never outrank one decisive conflict.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

MAX_SUSPICION = 99
SECONDARY_FINDING_WEIGHT = 0.3


class LineType(str, enum.Enum):
    """Structural role of a screenplay line (values are the wire strings)."""

    BASMALA = "basmala"
    SCENE_HEADER_1 = "scene-header-1"
    SCENE_HEADER_2 = "scene-header-2"
    SCENE_HEADER_3 = "scene-header-3"
    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    TRANSITION = "transition"

    @property
    def is_scene_header(self) -> bool:
        return self in (LineType.SCENE_HEADER_1, LineType.SCENE_HEADER_2, LineType.SCENE_HEADER_3)


class ClassificationMethod(str, enum.Enum):
    """How a line's type was decided."""

    REGEX = "regex"
    CONTEXT = "context"
    FALLBACK = "fallback"
    AGENT = "agent"


@dataclass(frozen=True, slots=True)
class ScreenplayLine:
    """A non-empty input line with its document-order index."""

    line_index: int
    raw: str
    normalized: str


@dataclass(frozen=True, slots=True)
class SuspicionFinding:
    """One diagnostic attached to a classified line."""

    tag: str
    score: int
    detail: str = ""
    suggested_type: LineType | None = None

    @property
    def reason(self) -> str:
        return f"{self.tag}: {self.detail}" if self.detail else self.tag


def aggregate_suspicion(scores: Iterable[int]) -> int:
    """Combine finding scores into a single total in ``[0, MAX_SUSPICION]``."""
    ordered = sorted((max(0, int(s)) for s in scores), reverse=True)
    if not ordered:
        return 0
    total = ordered[0] + SECONDARY_FINDING_WEIGHT * sum(ordered[1:])
    return min(MAX_SUSPICION, round(total))


@dataclass(slots=True)
class ClassifiedLine:
    """Classifier output for one line.

    ``assigned_type`` and ``confidence`` can be overwritten exactly once by a
    merged review decision (see :meth:`apply_review`).
    """

    line_index: int
    text: str
    assigned_type: LineType
    confidence: float
    normalized: str = ""
    method: ClassificationMethod = ClassificationMethod.REGEX
    findings: list[SuspicionFinding] = field(default_factory=list)
    review_reason: str | None = None
    reviewed: bool = False

    @property
    def reasons(self) -> list[str]:
        return [f.reason for f in self.findings]

    @property
    def total_suspicion(self) -> int:
        return aggregate_suspicion(f.score for f in self.findings)

    @property
    def word_count(self) -> int:
        return len((self.normalized or self.text).split())

    def add_finding(self, finding: SuspicionFinding) -> None:
        if any(f.tag == finding.tag and f.detail == finding.detail for f in self.findings):
            return
        self.findings.append(finding)

    def apply_review(self, final_type: LineType, confidence: float, reason: str) -> None:
        """Overwrite the classification with an external review decision.

        Raises:
            ValueError: If the line was already overwritten by a review.
        """
        if self.reviewed:
            raise ValueError(f"line {self.line_index} was already reviewed")
        self.assigned_type = final_type
        self.confidence = min(1.0, max(0.0, float(confidence)))
        self.method = ClassificationMethod.AGENT
        self.review_reason = reason
        self.reviewed = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the editor-facing field names."""
        data: dict[str, Any] = {
            "lineIndex": self.line_index,
            "text": self.text,
            "assignedType": self.assigned_type.value,
            "confidence": round(self.confidence, 4),
            "reasons": self.reasons,
            "totalSuspicion": self.total_suspicion,
            "method": self.method.value,
        }
        if self.review_reason is not None:
            data["reviewReason"] = self.review_reason
        return data


def is_suspicious(line: ClassifiedLine, threshold: int, confidence_floor: float) -> bool:
    """Return True if ``line`` should be escalated for external review."""
    return line.total_suspicion > threshold or line.confidence < confidence_floor
