"""Tests for the suspicion aggregator."""

from __future__ import annotations

import pytest

from asc.classifier.types import ClassifiedLine, LineType, SuspicionFinding
from asc.review.aggregator import AggregatorConfig, SuspicionAggregator, build_review_request


def _lines(rows: list[tuple[int, float]]) -> list[ClassifiedLine]:
    """Build lines from (suspicion score, confidence) pairs."""
    out: list[ClassifiedLine] = []
    for i, (score, confidence) in enumerate(rows):
        line = ClassifiedLine(
            line_index=i,
            text=f"سطر {i}",
            assigned_type=LineType.ACTION,
            confidence=confidence,
        )
        if score:
            line.add_finding(SuspicionFinding("sequence-violation", score, "character→action"))
        out.append(line)
    return out


def test_no_suspicious_lines_gives_empty_request() -> None:
    request = build_review_request(_lines([(0, 0.9), (40, 0.8), (60, 0.5)]))
    assert request.total_reviewed == 3
    assert request.suspicious_lines == []
    assert request.session_id


def test_threshold_and_confidence_floor() -> None:
    lines = _lines([(0, 0.9), (61, 0.9), (0, 0.49), (60, 0.9)])
    request = SuspicionAggregator().build_request(lines, session_id="s-1")
    assert request.session_id == "s-1"
    assert [item.line_index for item in request.suspicious_lines] == [1, 2]
    assert [item.item_index for item in request.suspicious_lines] == [0, 1]


def test_items_carry_reasons_and_context() -> None:
    lines = _lines([(0, 0.9)] * 8 + [(95, 0.9)] + [(0, 0.9)] * 2)
    item = SuspicionAggregator().build_request(lines).suspicious_lines[0]
    assert item.line_index == 8
    assert item.total_suspicion == 95
    assert item.assigned_type is LineType.ACTION
    assert item.reasons == ["sequence-violation: character→action"]
    assert [c.line_index for c in item.context_lines] == [3, 4, 5, 6, 7, 9, 10]


def test_context_radius_is_configurable() -> None:
    lines = _lines([(0, 0.9), (95, 0.9), (0, 0.9), (0, 0.9)])
    aggregator = SuspicionAggregator(AggregatorConfig(context_radius=1))
    item = aggregator.build_request(lines).suspicious_lines[0]
    assert [c.line_index for c in item.context_lines] == [0, 2]


def test_ratio_cap_keeps_most_suspicious_in_document_order() -> None:
    lines = _lines([(70, 0.9), (0, 0.9), (95, 0.9), (0, 0.9), (80, 0.9), (0, 0.9)])
    aggregator = SuspicionAggregator(AggregatorConfig(max_suspicious_ratio=0.34))
    request = aggregator.build_request(lines)
    assert [item.line_index for item in request.suspicious_lines] == [2, 4]
    assert [item.item_index for item in request.suspicious_lines] == [0, 1]


def test_request_serializes_camel_case() -> None:
    wire = SuspicionAggregator().build_request(_lines([(95, 0.9)]), session_id="abc").to_wire()
    assert wire["sessionId"] == "abc"
    assert wire["totalReviewed"] == 1
    item = wire["suspiciousLines"][0]
    assert item["itemIndex"] == 0
    assert item["assignedType"] == "action"
    assert item["totalSuspicion"] == 95
    assert item["contextLines"] == []


def test_long_text_is_clipped() -> None:
    lines = _lines([(95, 0.9)])
    lines[0].text = "أ" * 50
    item = SuspicionAggregator(AggregatorConfig(max_text_len=10)).build_request(lines).suspicious_lines[0]
    assert len(item.text) == 10
    assert item.text.endswith("…")


@pytest.mark.parametrize("kwargs", [{"context_radius": -1}, {"max_suspicious_ratio": 0}, {"max_suspicious_ratio": 1.5}])
def test_invalid_config(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        AggregatorConfig(**kwargs)
