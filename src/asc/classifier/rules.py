"""Ordered rule table for line classification.

Rules are evaluated top to bottom and the first matching rule decides the
line type. Every rule may also carry a conflict check that runs whether or not
it won, and rules flagged ``strong`` report a ``rule-conflict`` finding when
they match below the winner with a different type.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from asc.classifier.context_window import ContextWindow, PatternHints
from asc.classifier.types import (
    ClassificationMethod,
    ClassifiedLine,
    LineType,
    ScreenplayLine,
    SuspicionFinding,
)
from asc.patterns.arabic import (
    CHARACTER_CUE_RE,
    CHARACTER_STOP_WORDS,
    DASH_LEAD_RE,
    INLINE_DIALOGUE_RE,
    NARRATIVE_AUDIO_RE,
    NEGATION_PLUS_VERB_RE,
    PARENTHETICAL_RE,
    SCENE_HEADER_SPLIT_RE,
    SCENE_LOCATION_RE,
    SCENE_NUMBER_RE,
    SCENE_TIME_RE,
    TRANSITION_RE,
    has_dialogue_cue,
    is_basmala,
)
from asc.patterns.verbs import has_pronoun_action, is_action_verb_start

MAX_CHARACTER_WORDS = 4
MAX_INLINE_NAME_WORDS = 3
MAX_SCENE_HEADER_WORDS = 10
MAX_PLACE_WORDS = 6

_NAME_RE = re.compile(r"^[\w\s.'\-]+$")
_NEAR_TRANSITION_RE = re.compile(r"^\s*(?:قطع|انتقال|مزج|cut)\s+(?:إلى|الى|to)\s+\S", re.IGNORECASE)


@dataclass
class RuleContext:
    """Everything a rule may look at for one line."""

    line: ScreenplayLine
    window: ContextWindow
    hints: PatternHints
    words: list[str]
    verb_start: bool
    pronoun_action: bool
    negated_verb: bool
    dialogue_cue: bool
    narrative_audio: bool
    dash_lead: bool

    @classmethod
    def build(cls, line: ScreenplayLine, window: ContextWindow, hints: PatternHints) -> RuleContext:
        text = line.normalized
        return cls(
            line=line,
            window=window,
            hints=hints,
            words=text.split(),
            verb_start=is_action_verb_start(text),
            pronoun_action=has_pronoun_action(text),
            negated_verb=NEGATION_PLUS_VERB_RE.search(text) is not None,
            dialogue_cue=has_dialogue_cue(text),
            narrative_audio=NARRATIVE_AUDIO_RE.search(text) is not None,
            dash_lead=DASH_LEAD_RE.search(text) is not None,
        )

    @property
    def text(self) -> str:
        return self.line.normalized

    @property
    def prev(self) -> ClassifiedLine | None:
        return self.window.previous(1)

    @property
    def strong_action(self) -> bool:
        """Action evidence strong enough to end a dialogue block."""
        if self.narrative_audio or self.dash_lead:
            return True
        return not self.dialogue_cue and (self.verb_start or self.pronoun_action or self.negated_verb)


ConflictCheck = Callable[[RuleContext, LineType], SuspicionFinding | None]


@dataclass(frozen=True)
class Rule:
    """One row of the classification table."""

    name: str
    line_type: LineType
    weight: float
    matcher: Callable[[RuleContext], bool]
    conflict_check: ConflictCheck | None = None
    strong: bool = False
    method: ClassificationMethod = ClassificationMethod.REGEX


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def plausible_name(name: str, max_words: int = MAX_CHARACTER_WORDS) -> bool:
    """Return True if ``name`` could be a speaker name."""
    tokens = name.split()
    if not tokens or len(tokens) > max_words:
        return False
    if tokens[0] in CHARACTER_STOP_WORDS or TRANSITION_RE.match(name):
        return False
    if is_action_verb_start(name):
        return False
    return _NAME_RE.match(name) is not None and not any(ch.isdigit() for ch in name)


def character_name(text: str) -> str | None:
    """Return the speaker name if ``text`` is a character cue line."""
    match = CHARACTER_CUE_RE.match(text)
    if match is None:
        return None
    name = match.group("name").strip()
    return name if plausible_name(name) else None


def scene_header_remainder(line: ClassifiedLine) -> str:
    """Return what follows the scene number on a scene-header-1 line."""
    match = SCENE_HEADER_SPLIT_RE.match(line.normalized or line.text)
    return match.group(2).strip() if match else ""


def _has_time(text: str) -> bool:
    return SCENE_TIME_RE.search(text) is not None


def _has_location(text: str) -> bool:
    return SCENE_LOCATION_RE.search(text) is not None


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


def _match_basmala(ctx: RuleContext) -> bool:
    return is_basmala(ctx.text)


def _match_scene_number(ctx: RuleContext) -> bool:
    return SCENE_NUMBER_RE.match(ctx.text) is not None


def _match_scene_time_place(ctx: RuleContext) -> bool:
    if ctx.verb_start or len(ctx.words) > MAX_SCENE_HEADER_WORDS or ctx.text.endswith(":"):
        return False
    return _has_time(ctx.text) and _has_location(ctx.text)


def _match_scene_after_number(ctx: RuleContext) -> bool:
    prev = ctx.prev
    if prev is None or prev.assigned_type is not LineType.SCENE_HEADER_1 or scene_header_remainder(prev):
        return False
    if ctx.verb_start or len(ctx.words) > MAX_SCENE_HEADER_WORDS:
        return False
    return _has_time(ctx.text) or _has_location(ctx.text)


def _match_scene_place(ctx: RuleContext) -> bool:
    prev = ctx.prev
    if prev is None:
        return False
    after_time = prev.assigned_type is LineType.SCENE_HEADER_2
    after_full_number = prev.assigned_type is LineType.SCENE_HEADER_1 and bool(scene_header_remainder(prev))
    if not (after_time or after_full_number):
        return False
    if len(ctx.words) > MAX_PLACE_WORDS or ctx.text.endswith(":"):
        return False
    return not (ctx.verb_start or ctx.pronoun_action or ctx.dialogue_cue or ctx.narrative_audio)


def _match_transition(ctx: RuleContext) -> bool:
    return TRANSITION_RE.match(ctx.text) is not None


def _match_character(ctx: RuleContext) -> bool:
    return character_name(ctx.text) is not None and not ctx.window.speaker_unresolved


def _match_parenthetical(ctx: RuleContext) -> bool:
    return PARENTHETICAL_RE.match(ctx.text) is not None


def _match_dialogue(ctx: RuleContext) -> bool:
    return ctx.window.active_block is not None and not ctx.strong_action


def _match_inline_dialogue(ctx: RuleContext) -> bool:
    match = INLINE_DIALOGUE_RE.match(ctx.text)
    if match is None:
        return False
    return plausible_name(match.group("name").strip(), MAX_INLINE_NAME_WORDS)


def _match_narrative_audio(ctx: RuleContext) -> bool:
    return ctx.narrative_audio


def _match_action_verb(ctx: RuleContext) -> bool:
    return ctx.verb_start


def _match_pronoun_action(ctx: RuleContext) -> bool:
    return ctx.pronoun_action


def _match_negated_verb(ctx: RuleContext) -> bool:
    return ctx.negated_verb and not ctx.dialogue_cue


def _match_dash_lead(ctx: RuleContext) -> bool:
    return ctx.dash_lead


def _match_descriptive(ctx: RuleContext) -> bool:
    return len(ctx.words) >= 6 and not ctx.dialogue_cue and not ctx.text.endswith(":")


def _match_short(ctx: RuleContext) -> bool:
    return len(ctx.words) <= 3


def _always(ctx: RuleContext) -> bool:
    return True


# ---------------------------------------------------------------------------
# Conflict checks
# ---------------------------------------------------------------------------


def _check_unresolved_speaker(ctx: RuleContext, winner: LineType) -> SuspicionFinding | None:
    """A second cue while the previous speaker has not spoken yet."""
    if winner is LineType.CHARACTER or not ctx.window.speaker_unresolved:
        return None
    if character_name(ctx.text) is None:
        return None
    return SuspicionFinding(
        "sequence-violation",
        95,
        "character→character",
        LineType.CHARACTER,
    )


def _check_near_transition(ctx: RuleContext, winner: LineType) -> SuspicionFinding | None:
    if winner is LineType.TRANSITION or len(ctx.words) > 6:
        return None
    if _NEAR_TRANSITION_RE.match(ctx.text) is None:
        return None
    return SuspicionFinding("content-type-mismatch", 58, "transition-with-destination", LineType.TRANSITION)


# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

RULES: tuple[Rule, ...] = (
    Rule("basmala", LineType.BASMALA, 0.99, _match_basmala, strong=True),
    Rule("scene-number", LineType.SCENE_HEADER_1, 0.97, _match_scene_number, strong=True),
    Rule("scene-time-place", LineType.SCENE_HEADER_2, 0.9, _match_scene_time_place),
    Rule(
        "scene-after-number",
        LineType.SCENE_HEADER_2,
        0.8,
        _match_scene_after_number,
        method=ClassificationMethod.CONTEXT,
    ),
    Rule(
        "scene-place",
        LineType.SCENE_HEADER_3,
        0.7,
        _match_scene_place,
        method=ClassificationMethod.CONTEXT,
    ),
    Rule("transition", LineType.TRANSITION, 0.95, _match_transition, _check_near_transition, strong=True),
    Rule("character-cue", LineType.CHARACTER, 0.9, _match_character, _check_unresolved_speaker, strong=True),
    Rule("parenthetical", LineType.PARENTHETICAL, 0.88, _match_parenthetical, strong=True),
    Rule("dialogue-block", LineType.DIALOGUE, 0.85, _match_dialogue, method=ClassificationMethod.CONTEXT),
    Rule("inline-dialogue", LineType.DIALOGUE, 0.75, _match_inline_dialogue),
    Rule("narrative-audio", LineType.ACTION, 0.85, _match_narrative_audio),
    Rule("action-verb", LineType.ACTION, 0.9, _match_action_verb, strong=True),
    Rule("pronoun-action", LineType.ACTION, 0.85, _match_pronoun_action, strong=True),
    Rule("negated-verb", LineType.ACTION, 0.85, _match_negated_verb),
    Rule("dash-action", LineType.ACTION, 0.8, _match_dash_lead),
    Rule(
        "descriptive-action",
        LineType.ACTION,
        0.65,
        _match_descriptive,
        method=ClassificationMethod.CONTEXT,
    ),
    Rule("fallback-short", LineType.ACTION, 0.45, _match_short, method=ClassificationMethod.FALLBACK),
    Rule("fallback-action", LineType.ACTION, 0.55, _always, method=ClassificationMethod.FALLBACK),
)


@dataclass
class RuleOutcome:
    """Winning rule plus the findings produced while evaluating the table."""

    rule: Rule
    findings: list[SuspicionFinding]


def evaluate_rules(ctx: RuleContext, rules: tuple[Rule, ...] = RULES) -> RuleOutcome:
    """Run the table against ``ctx`` and return the winner with its findings.

    Raises:
        ValueError: If no rule matches (the table must end with a catch-all).
    """
    winner_pos = next((i for i, rule in enumerate(rules) if rule.matcher(ctx)), None)
    if winner_pos is None:
        raise ValueError("rule table has no catch-all entry")
    winner = rules[winner_pos]
    findings: list[SuspicionFinding] = []
    for rule in rules:
        if rule.conflict_check is None:
            continue
        finding = rule.conflict_check(ctx, winner.line_type)
        if finding is not None:
            findings.append(finding)
    for rule in rules[winner_pos + 1 :]:
        if rule.strong and rule.line_type is not winner.line_type and rule.matcher(ctx):
            findings.append(
                SuspicionFinding(
                    "rule-conflict",
                    45,
                    f"{winner.name}/{rule.name}",
                    rule.line_type,
                )
            )
    return RuleOutcome(rule=winner, findings=findings)
