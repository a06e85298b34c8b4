"""Tests for post-classification diagnostics and suspicion scoring."""

from __future__ import annotations

import pytest

from asc.classifier.diagnostics import (
    check_confidence,
    check_content,
    check_sequence,
    check_split_fragment,
    check_statistics,
    sequence_severity,
)
from asc.classifier.types import (
    ClassificationMethod,
    ClassifiedLine,
    LineType,
    SuspicionFinding,
    aggregate_suspicion,
)

LT = LineType


def _line(
    line_type: LineType,
    text: str = "نص",
    confidence: float = 0.9,
    method: ClassificationMethod = ClassificationMethod.REGEX,
) -> ClassifiedLine:
    return ClassifiedLine(
        line_index=0,
        text=text,
        normalized=text,
        assigned_type=line_type,
        confidence=confidence,
        method=method,
    )


@pytest.mark.parametrize(
    ("prev", "current", "score"),
    [
        (LT.CHARACTER, LT.CHARACTER, 95),
        (LT.PARENTHETICAL, LT.ACTION, 90),
        (LT.TRANSITION, LT.DIALOGUE, 80),
        (LT.TRANSITION, LT.CHARACTER, 75),
        (LT.SCENE_HEADER_2, LT.DIALOGUE, 70),
        (LT.SCENE_HEADER_1, LT.ACTION, 75),
        (LT.CHARACTER, LT.ACTION, 65),
    ],
)
def test_sequence_severity(prev: LineType, current: LineType, score: int) -> None:
    assert sequence_severity(prev, current) == score


def test_check_sequence_allows_valid_steps() -> None:
    assert check_sequence(None, _line(LT.DIALOGUE)) is None
    assert check_sequence(_line(LT.CHARACTER), _line(LT.DIALOGUE)) is None
    assert check_sequence(_line(LT.SCENE_HEADER_3), _line(LT.ACTION)) is None


def test_check_sequence_complete_scene_number_allows_action() -> None:
    prev = _line(LT.SCENE_HEADER_1, "مشهد 1 - ليل - داخلي")
    assert check_sequence(prev, _line(LT.ACTION), prev_complete=True) is None
    finding = check_sequence(prev, _line(LT.ACTION))
    assert finding == SuspicionFinding("sequence-violation", 75, "scene-header-1→action")


def test_check_content_action_that_looks_like_a_cue() -> None:
    findings = check_content(_line(LT.ACTION, "الرجل الغريب:"))
    assert findings[0].detail == "action-looks-like-cue"
    assert findings[0].score == 78
    assert findings[0].suggested_type is LT.CHARACTER


def test_check_content_action_with_speech_markers() -> None:
    findings = check_content(_line(LT.ACTION, "هل ستأتي غدا؟"))
    assert [f.detail for f in findings] == ["action-with-speech-markers"]


def test_check_content_other_types() -> None:
    assert check_content(_line(LT.DIALOGUE, "(يضحك)"))[0].score == 88
    assert check_content(_line(LT.CHARACTER, "الرجل الذي كان يقف عند الباب"))[0].score == 80
    assert check_content(_line(LT.TRANSITION, "قطع إلى المشهد التالي حيث يقف الجميع"))[0].score == 70
    assert check_content(_line(LT.DIALOGUE, "مرحبا")) == []


def test_check_statistics() -> None:
    long_dialogue = " ".join(["كلمة"] * 150)
    assert check_statistics(_line(LT.DIALOGUE, long_dialogue)).score == 90
    assert check_statistics(_line(LT.CHARACTER, "أ ب ج د هـ و")).score == 66
    assert check_statistics(_line(LT.ACTION, "يجلس")).score == 55
    assert check_statistics(_line(LT.ACTION, "يجلس أحمد")) is None


def test_check_confidence() -> None:
    assert check_confidence(_line(LT.ACTION, confidence=0.3)).score == 55
    fallback = _line(LT.ACTION, confidence=0.55, method=ClassificationMethod.FALLBACK)
    assert check_confidence(fallback).score == 50
    assert check_confidence(_line(LT.ACTION, confidence=0.55)) is None


def test_split_fragment_needs_fallback_fragment() -> None:
    fragment = _line(LT.ACTION, "عبد", confidence=0.45, method=ClassificationMethod.FALLBACK)
    finding = check_split_fragment(fragment, "الله")
    assert finding is not None
    assert finding.detail == "عبدالله"
    assert finding.suggested_type is LT.CHARACTER

    assert check_split_fragment(_line(LT.ACTION, "عبد"), "الله") is None
    assert check_split_fragment(fragment, "عبد الرحمن") is None
    assert check_split_fragment(None, "الله") is None


@pytest.mark.parametrize(
    ("scores", "total"),
    [
        ([], 0),
        ([40], 40),
        ([60, 10], 63),
        ([95, 40], 99),
        ([50, 50], 65),
    ],
)
def test_aggregate_suspicion(scores: list[int], total: int) -> None:
    assert aggregate_suspicion(scores) == total


def test_add_finding_deduplicates_and_review_is_single_shot() -> None:
    line = _line(LT.ACTION)
    line.add_finding(SuspicionFinding("low-confidence", 50, "fallback-action"))
    line.add_finding(SuspicionFinding("low-confidence", 50, "fallback-action"))
    assert line.reasons == ["low-confidence: fallback-action"]

    line.apply_review(LT.CHARACTER, 1.4, "speaker")
    assert line.confidence == 1.0
    assert line.method is ClassificationMethod.AGENT
    with pytest.raises(ValueError):
        line.apply_review(LT.ACTION, 0.5, "again")
