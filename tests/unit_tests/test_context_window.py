"""Tests for the run-local context window."""

from __future__ import annotations

import pytest

from asc.classifier.context_window import (
    DialogueBlock,
    RelationKind,
    add_line_relation,
    close_window,
    create_context_window,
    detect_pattern,
    get_active_dialogue_block,
    push_line,
    track_dialogue_block,
    update_confidence,
)
from asc.classifier.types import ClassifiedLine, LineType, ScreenplayLine


def _line(index: int, line_type: LineType, text: str = "x", confidence: float = 0.8) -> ClassifiedLine:
    return ClassifiedLine(
        line_index=index,
        text=text,
        normalized=text,
        assigned_type=line_type,
        confidence=confidence,
    )


def _feed(window, line: ClassifiedLine) -> None:
    push_line(window, line)
    track_dialogue_block(window, line)


def test_create_context_window_is_empty() -> None:
    window = create_context_window()
    assert window.size == 10
    assert len(window.lines) == 0
    assert get_active_dialogue_block(window) is None
    assert window.relations == []


def test_window_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        create_context_window(0)


def test_buffer_evicts_oldest_lines() -> None:
    window = create_context_window(3)
    for i in range(5):
        push_line(window, _line(i, LineType.ACTION))
    assert [ln.line_index for ln in window.lines] == [2, 3, 4]
    assert window.previous().line_index == 4
    assert window.previous(3).line_index == 2
    assert window.previous(4) is None


def test_push_line_requires_increasing_indices() -> None:
    window = create_context_window()
    push_line(window, _line(3, LineType.ACTION))
    with pytest.raises(ValueError):
        push_line(window, _line(3, LineType.ACTION))


def test_dialogue_block_open_extend_close() -> None:
    window = create_context_window()
    _feed(window, _line(0, LineType.CHARACTER, "أحمد:"))
    block = get_active_dialogue_block(window)
    assert block == DialogueBlock(0, 0, 0, "أحمد")
    assert window.speaker_unresolved

    _feed(window, _line(1, LineType.DIALOGUE, "مرحبا"))
    _feed(window, _line(2, LineType.PARENTHETICAL, "(بهدوء)"))
    assert get_active_dialogue_block(window).end_index == 2
    assert not window.speaker_unresolved

    _feed(window, _line(3, LineType.ACTION, "يدخل محمد"))
    assert get_active_dialogue_block(window) is None
    assert window.closed_blocks == [DialogueBlock(0, 2, 0, "أحمد")]


def test_new_character_records_speaker_change() -> None:
    window = create_context_window()
    _feed(window, _line(0, LineType.CHARACTER, "أحمد:"))
    _feed(window, _line(1, LineType.DIALOGUE, "مرحبا"))
    _feed(window, _line(2, LineType.CHARACTER, "منى (بهدوء):"))
    assert window.closed_blocks[-1].end_index == 1
    assert get_active_dialogue_block(window).character_name == "منى"
    assert window.relations[-1].kind is RelationKind.SPEAKER_CHANGE
    assert (window.relations[-1].from_index, window.relations[-1].to_index) == (0, 2)


def test_close_window_closes_open_block() -> None:
    window = create_context_window()
    _feed(window, _line(0, LineType.CHARACTER, "أحمد:"))
    _feed(window, _line(1, LineType.DIALOGUE, "مرحبا"))
    close_window(window)
    assert get_active_dialogue_block(window) is None
    assert window.closed_blocks == [DialogueBlock(0, 1, 0, "أحمد")]


def test_block_cannot_end_before_it_starts() -> None:
    block = DialogueBlock(4, 4, 4)
    with pytest.raises(ValueError):
        block.extend_to(3)


def test_relations_are_append_only() -> None:
    window = create_context_window()
    add_line_relation(window, 0, 1, RelationKind.CONTINUATION)
    add_line_relation(window, 1, 2, "sequence-violation", "character→action")
    assert [r.kind for r in window.relations] == [RelationKind.CONTINUATION, RelationKind.SEQUENCE_VIOLATION]
    assert window.relations[1].detail == "character→action"


def test_update_confidence_clamps_and_skips_evicted_lines() -> None:
    window = create_context_window(2)
    first = _line(0, LineType.ACTION, confidence=0.95)
    push_line(window, first)
    update_confidence(window, 0, 0.2)
    assert first.confidence == 1.0
    update_confidence(window, 0, -1.5)
    assert first.confidence == 0.0

    push_line(window, _line(1, LineType.ACTION))
    push_line(window, _line(2, LineType.ACTION))
    update_confidence(window, 0, 0.5)
    assert first.confidence == 0.0


def test_update_confidence_leaves_reviewed_lines_alone() -> None:
    window = create_context_window()
    line = _line(0, LineType.ACTION, confidence=0.4)
    line.apply_review(LineType.CHARACTER, 0.9, "speaker name")
    push_line(window, line)
    update_confidence(window, 0, -0.3)
    assert line.confidence == 0.9


def test_detect_pattern_biases_dialogue_after_character() -> None:
    window = create_context_window()
    _feed(window, _line(0, LineType.CHARACTER, "أحمد:"))
    hints = detect_pattern(window, ScreenplayLine(1, "مرحبا يا صديقي", "مرحبا يا صديقي"))
    assert hints.bias(LineType.DIALOGUE) == pytest.approx(0.1)
    assert hints.strongest() == (LineType.DIALOGUE, pytest.approx(0.1))


def test_detect_pattern_biases_scene_details_after_bare_scene_number() -> None:
    window = create_context_window()
    _feed(window, _line(0, LineType.SCENE_HEADER_1, "مشهد 1"))
    hints = detect_pattern(window, ScreenplayLine(1, "ليل - داخلي", "ليل - داخلي"))
    assert hints.bias(LineType.SCENE_HEADER_2) == pytest.approx(0.1)


def test_detect_pattern_reports_dialect_and_action_verbs() -> None:
    window = create_context_window()
    dialect = detect_pattern(window, ScreenplayLine(0, "انت عايز ايه", "انت عايز ايه"))
    assert dialect.dialect == "egyptian"
    assert dialect.bias(LineType.DIALOGUE) == pytest.approx(0.05)

    action = detect_pattern(window, ScreenplayLine(0, "يجلس على الكرسي", "يجلس على الكرسي"))
    assert action.dialect is None
    assert action.bias(LineType.ACTION) == pytest.approx(0.1)
