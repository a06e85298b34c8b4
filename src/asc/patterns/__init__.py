"""Pattern library: lexicons and regular expressions over normalized Arabic text."""

from asc.patterns.arabic import (
    ARABIC_NUMBER_RE,
    DIALECT_PATTERNS,
    NEGATION_PATTERNS,
    NEGATION_PLUS_VERB_RE,
    PRONOUN_RE,
    TRANSITION_RE,
    convert_indic_digits,
    detect_dialect,
    has_dialogue_cue,
    has_indic_digits,
    has_negation,
    is_basmala,
)
from asc.patterns.verbs import (
    FULL_ACTION_VERB_SET,
    has_pronoun_action,
    is_action_verb,
    is_action_verb_start,
)

__all__ = [
    "ARABIC_NUMBER_RE",
    "DIALECT_PATTERNS",
    "FULL_ACTION_VERB_SET",
    "NEGATION_PATTERNS",
    "NEGATION_PLUS_VERB_RE",
    "PRONOUN_RE",
    "TRANSITION_RE",
    "convert_indic_digits",
    "detect_dialect",
    "has_dialogue_cue",
    "has_indic_digits",
    "has_negation",
    "has_pronoun_action",
    "is_action_verb",
    "is_action_verb_start",
    "is_basmala",
]
