"""Tests for the review markdown generator."""

from asc.classifier.line_classifier import LineClassifier
from asc.review.contracts import ReviewStatus
from asc.review.protocol import MergeOutcome
from asc.review.report import ReportConfig, ReviewReporter, make_review_markdown


def test_make_review_markdown_produces_sections() -> None:
    lines = LineClassifier().classify("أحمد:\nيدخل محمد الغرفة\nكلام غريب").lines

    md = make_review_markdown(lines)

    assert "# Classification review" in md
    assert "*lines:* **3** • *suspicious:* **2**" in md
    assert "## Types" in md
    assert "| action | 2 |" in md
    assert "## Reasons" in md
    assert "| sequence-violation | 1 | 65.0 |" in md
    assert "## Agent review" not in md


def test_report_includes_outcome_and_escapes_pipes() -> None:
    lines = LineClassifier().classify("يدخل أحمد | الغرفة").lines
    outcome = MergeOutcome(status=ReviewStatus.ERROR, message="review timed out after 30s", model="m")

    md = ReviewReporter(ReportConfig(show_reason_breakdown=False)).make_markdown(lines, outcome)

    assert "## Reasons" not in md
    assert "## Agent review" in md
    assert "*status:* **error**" in md
    assert "review timed out after 30s" in md
    assert "يدخل أحمد \\| الغرفة" in md
