"""Tests for the Arabic pattern library and the action-verb lexicon."""

from __future__ import annotations

import pytest

from asc.patterns import (
    FULL_ACTION_VERB_SET,
    NEGATION_PLUS_VERB_RE,
    TRANSITION_RE,
    convert_indic_digits,
    detect_dialect,
    has_indic_digits,
    has_negation,
    has_pronoun_action,
    is_action_verb,
    is_action_verb_start,
    is_basmala,
)


@pytest.mark.parametrize(
    ("text", "dialect"),
    [
        ("أنا عايز أروح دلوقتي", "egyptian"),
        ("بدي روح هلق", "levantine"),
        ("شلون حالك اليوم", "gulf"),
        ("ابي أسوي شي", "gulf"),
        ("عايز أروح البيت", "egyptian"),
        ("بدي أروح", "levantine"),
        ("ابي أسوي", "gulf"),
        ("يدخل الغرفة", None),
        ("ذهب إلى البيت", None),
    ],
)
def test_detect_dialect(text: str, dialect: str | None) -> None:
    assert detect_dialect(text) == dialect


def test_dialect_markers_match_whole_words_only() -> None:
    # "داخلي" contains the letters of "دي" but is not the Egyptian marker
    assert detect_dialect("ليل - داخلي") is None


@pytest.mark.parametrize("text", ["قطع إلى:", "قطع", "CUT TO:", "مزج.", "فلاش باك", "fade out"])
def test_transition_matches_whole_line(text: str) -> None:
    assert TRANSITION_RE.match(text)


@pytest.mark.parametrize("text", ["قطع الطريق إلى المنزل", "يقطع الخبز", "انتقال سريع للكاميرا نحوه"])
def test_transition_rejects_prose(text: str) -> None:
    assert TRANSITION_RE.match(text) is None


def test_negation_plus_third_person_verb() -> None:
    assert NEGATION_PLUS_VERB_RE.search("لا يتحرك")
    assert NEGATION_PLUS_VERB_RE.search("ولم يرد عليه")
    assert NEGATION_PLUS_VERB_RE.search("لا تتحرك") is None
    assert NEGATION_PLUS_VERB_RE.search("لا أعرف") is None


def test_broad_negation_markers() -> None:
    assert has_negation("مش عارف")
    assert has_negation("ماعرفش حاجة")
    assert has_negation("لن أذهب")
    assert not has_negation("يدخل الغرفة")


def test_indic_digit_conversion() -> None:
    assert convert_indic_digits("مشهد ١٢") == "مشهد 12"
    assert convert_indic_digits("۴۵ دقيقة") == "45 دقيقة"
    assert has_indic_digits("مشهد ٣")
    assert not has_indic_digits("مشهد 3")


def test_pronoun_action_requires_standalone_pronoun() -> None:
    assert has_pronoun_action("وهو مازال يتوضأ")
    assert has_pronoun_action("هي تبتسم")
    assert not has_pronoun_action("الاسطى")
    assert not has_pronoun_action("إبراهيم يجلس")


@pytest.mark.parametrize("text", ["هو تاجر", "هو في تونس", "هي طالبة", "هم يا جماعة"])
def test_pronoun_action_needs_a_known_verb(text: str) -> None:
    assert not has_pronoun_action(text)


def test_basmala() -> None:
    assert is_basmala("بسم الله الرحمن الرحيم")
    assert not is_basmala("بسم الله")
    assert not is_basmala("قال بسم الله الرحمن الرحيم ثم دخل البيت وجلس على الكرسي طويلا")


def test_action_verb_lexicon() -> None:
    assert len(FULL_ACTION_VERB_SET) > 250
    for verb in ("يدخل", "ينظر", "يجلس", "تجلس", "استدار", "ابتسم", "تجهم", "ترنح", "اندفع"):
        assert verb in FULL_ACTION_VERB_SET


def test_action_verb_start_handles_particles_and_punctuation() -> None:
    assert is_action_verb_start("ويجلس على الكرسي")
    assert is_action_verb_start("فتنظر إليه")
    assert is_action_verb_start("- تنظر إليه بدهشة")
    assert not is_action_verb_start("أحمد يجلس")
    assert not is_action_verb_start("")


def test_particle_is_not_stripped_from_short_tokens() -> None:
    assert is_action_verb("فتح")
    assert not is_action_verb("وهو")
