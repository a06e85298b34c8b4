"""Post-classification diagnostics.

These checks look at a line after its type was chosen and report findings
that make it a candidate for external review: impossible screenplay
sequences, content that does not fit the assigned type, word counts far
outside what the type normally holds, and weak confidence.
"""

from __future__ import annotations

from asc.classifier.types import ClassificationMethod, ClassifiedLine, LineType, SuspicionFinding
from asc.patterns.arabic import (
    CHARACTER_STOP_WORDS,
    DIALOGUE_END_RE,
    DIALOGUE_START_RE,
    NEGATION_PLUS_VERB_RE,
    QUOTE_START_RE,
    has_negation,
)

LT = LineType

# Types that may follow each type in a well formed screenplay.
VALID_NEXT: dict[LineType, frozenset[LineType]] = {
    LT.BASMALA: frozenset({LT.SCENE_HEADER_1, LT.SCENE_HEADER_2, LT.ACTION, LT.TRANSITION, LT.CHARACTER}),
    LT.SCENE_HEADER_1: frozenset({LT.SCENE_HEADER_2, LT.SCENE_HEADER_3, LT.ACTION}),
    LT.SCENE_HEADER_2: frozenset({LT.SCENE_HEADER_3, LT.ACTION, LT.CHARACTER}),
    LT.SCENE_HEADER_3: frozenset({LT.ACTION, LT.CHARACTER}),
    LT.ACTION: frozenset({LT.ACTION, LT.CHARACTER, LT.TRANSITION, LT.SCENE_HEADER_1, LT.SCENE_HEADER_2}),
    LT.CHARACTER: frozenset({LT.DIALOGUE, LT.PARENTHETICAL}),
    LT.DIALOGUE: frozenset(
        {LT.DIALOGUE, LT.PARENTHETICAL, LT.CHARACTER, LT.ACTION, LT.TRANSITION, LT.SCENE_HEADER_1, LT.SCENE_HEADER_2}
    ),
    LT.PARENTHETICAL: frozenset({LT.DIALOGUE}),
    LT.TRANSITION: frozenset({LT.SCENE_HEADER_1, LT.SCENE_HEADER_2, LT.ACTION}),
}

_SCENE_HEADERS = (LT.SCENE_HEADER_1, LT.SCENE_HEADER_2, LT.SCENE_HEADER_3)

DEFAULT_SEQUENCE_SEVERITY = 65


def sequence_severity(prev: LineType, current: LineType) -> int:
    """Return the suspicion score for an invalid ``prev`` → ``current`` step."""
    if prev is LT.CHARACTER and current is LT.CHARACTER:
        return 95
    if prev is LT.PARENTHETICAL and current in (LT.ACTION, LT.CHARACTER, LT.TRANSITION):
        return 90
    if prev is LT.TRANSITION and current is LT.DIALOGUE:
        return 80
    if prev is LT.TRANSITION and current is LT.CHARACTER:
        return 75
    if prev in _SCENE_HEADERS and current is LT.DIALOGUE:
        return 70
    if prev is LT.SCENE_HEADER_1 and current in (LT.ACTION, LT.CHARACTER):
        return 75
    return DEFAULT_SEQUENCE_SEVERITY


def check_sequence(
    prev: ClassifiedLine | None,
    current: ClassifiedLine,
    prev_complete: bool = False,
) -> SuspicionFinding | None:
    """Check the step from ``prev`` to ``current`` against :data:`VALID_NEXT`.

    Args:
        prev: Previous classified line (None at document start).
        current: The line just classified.
        prev_complete: True when ``prev`` is a scene-header-1 that already
            carries time/place details, which makes action a valid successor.

    Returns:
        A ``sequence-violation`` finding, or None if the step is allowed.
    """
    if prev is None:
        return None
    a, b = prev.assigned_type, current.assigned_type
    if b in VALID_NEXT[a]:
        return None
    if a is LT.SCENE_HEADER_1 and prev_complete and b in (LT.ACTION, LT.CHARACTER):
        return None
    return SuspicionFinding(
        "sequence-violation",
        sequence_severity(a, b),
        f"{a.value}→{b.value}",
    )


def check_content(line: ClassifiedLine) -> list[SuspicionFinding]:
    """Return findings for content that contradicts the assigned type."""
    text = line.normalized or line.text
    words = line.word_count
    out: list[SuspicionFinding] = []
    if line.assigned_type is LT.ACTION:
        if text.endswith(":") and words <= 3:
            out.append(SuspicionFinding("content-type-mismatch", 78, "action-looks-like-cue", LT.CHARACTER))
        if DIALOGUE_END_RE.search(text) or QUOTE_START_RE.search(text) or DIALOGUE_START_RE.search(text):
            out.append(SuspicionFinding("content-type-mismatch", 62, "action-with-speech-markers", LT.DIALOGUE))
        if has_negation(text) and not NEGATION_PLUS_VERB_RE.search(text):
            out.append(SuspicionFinding("speech-negation", 50, "", LT.DIALOGUE))
    elif line.assigned_type is LT.DIALOGUE:
        if text.startswith("(") and text.endswith(")"):
            out.append(SuspicionFinding("content-type-mismatch", 88, "dialogue-fully-parenthesized", LT.PARENTHETICAL))
    elif line.assigned_type is LT.CHARACTER:
        if words > 5:
            out.append(SuspicionFinding("content-type-mismatch", 80, "character-too-long"))
    elif line.assigned_type is LT.TRANSITION:
        if words > 6:
            out.append(SuspicionFinding("content-type-mismatch", 70, "transition-too-long", LT.ACTION))
    return out


# Expected word-count range per type.
TYPE_WORD_RANGES: dict[LineType, tuple[int, int]] = {
    LT.CHARACTER: (1, 4),
    LT.PARENTHETICAL: (1, 12),
    LT.TRANSITION: (1, 5),
    LT.DIALOGUE: (1, 140),
    LT.ACTION: (2, 240),
    LT.SCENE_HEADER_1: (2, 15),
    LT.SCENE_HEADER_2: (1, 15),
    LT.SCENE_HEADER_3: (1, 15),
    LT.BASMALA: (1, 8),
}


def check_statistics(line: ClassifiedLine) -> SuspicionFinding | None:
    """Flag word counts outside :data:`TYPE_WORD_RANGES`."""
    low, high = TYPE_WORD_RANGES[line.assigned_type]
    words = line.word_count
    if words > high:
        score = min(60 + (words - high) * 3, 90)
        return SuspicionFinding("statistical-anomaly", score, f"{words} words > {high}")
    if line.assigned_type is LT.ACTION and words < low:
        return SuspicionFinding("statistical-anomaly", 55, f"{words} word action")
    return None


def check_confidence(line: ClassifiedLine) -> SuspicionFinding | None:
    if line.confidence < 0.45:
        return SuspicionFinding("low-confidence", 55, f"{line.confidence:.2f}")
    if line.method is ClassificationMethod.FALLBACK and line.confidence < 0.6:
        return SuspicionFinding("low-confidence", 50, "fallback-action")
    return None


def check_split_fragment(prev: ClassifiedLine | None, name: str) -> SuspicionFinding | None:
    """Detect a speaker name broken across two physical lines.

    ``prev`` is the short line just before a character cue whose name is
    ``name``. When joining the two reads like a single name ("عبد" + "الله:")
    the previous line is reported; the text itself is never merged here.
    """
    if prev is None or prev.assigned_type is not LT.ACTION or prev.method is not ClassificationMethod.FALLBACK:
        return None
    fragment = (prev.normalized or prev.text).strip()
    tokens = fragment.split()
    if not tokens or len(tokens) > 2 or not 2 <= len(fragment) <= 14:
        return None
    if not 1 <= len(name.replace(" ", "")) <= 4:
        return None
    if tokens[0] in CHARACTER_STOP_WORDS or not all(ch.isalpha() or ch.isspace() for ch in fragment):
        return None
    joined = f"{fragment}{name}"
    return SuspicionFinding(
        "split-character-fragment",
        92,
        joined,
        LT.CHARACTER,
    )
