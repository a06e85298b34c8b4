"""Run-local context window for the line classifier.

A :class:`ContextWindow` is created per classification run and threaded
through every line. It keeps the last few classified lines, the currently
open dialogue block and an append-only log of line relations. Nothing here is
shared between runs.

The module-level functions mutate the window they receive and return it so
calls can be chained or used functionally.
"""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field

from asc.classifier.types import ClassifiedLine, LineType, ScreenplayLine
from asc.patterns.arabic import (
    CHARACTER_CUE_RE,
    NEGATION_PLUS_VERB_RE,
    SCENE_HEADER_SPLIT_RE,
    SCENE_LOCATION_RE,
    SCENE_TIME_RE,
    detect_dialect,
    has_dialogue_cue,
)
from asc.patterns.verbs import has_pronoun_action, is_action_verb_start

DEFAULT_WINDOW_SIZE = 10

# Lines of these types keep an open dialogue block alive.
_BLOCK_MEMBERS = (LineType.DIALOGUE, LineType.PARENTHETICAL)


class RelationKind(str, enum.Enum):
    """Kinds of relation recorded between two lines."""

    CONTINUATION = "continuation"
    SPEAKER_CHANGE = "speaker-change"
    SEQUENCE_VIOLATION = "sequence-violation"


@dataclass
class DialogueBlock:
    """Contiguous dialogue/parenthetical run following one character cue."""

    start_index: int
    end_index: int
    character_line_index: int
    character_name: str = ""

    def extend_to(self, line_index: int) -> None:
        if line_index < self.start_index:
            raise ValueError(f"block cannot end at {line_index} before it starts at {self.start_index}")
        self.end_index = line_index

    @property
    def has_speech(self) -> bool:
        """False while only the character cue itself belongs to the block."""
        return self.end_index > self.character_line_index


@dataclass(frozen=True, slots=True)
class LineRelation:
    from_index: int
    to_index: int
    kind: RelationKind
    detail: str = ""


@dataclass
class PatternHints:
    """Type biases derived from the current text and the preceding lines."""

    biases: dict[LineType, float] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)
    dialect: str | None = None

    def bias(self, line_type: LineType) -> float:
        return self.biases.get(line_type, 0.0)

    def add(self, line_type: LineType, amount: float, note: str) -> None:
        self.biases[line_type] = self.biases.get(line_type, 0.0) + amount
        self.notes.append(note)

    def strongest(self) -> tuple[LineType, float] | None:
        if not self.biases:
            return None
        line_type = max(self.biases, key=lambda t: self.biases[t])
        return line_type, self.biases[line_type]


@dataclass
class ContextWindow:
    """Bounded history plus dialogue-block state for one run."""

    size: int = DEFAULT_WINDOW_SIZE
    lines: deque[ClassifiedLine] = field(init=False)
    active_block: DialogueBlock | None = None
    relations: list[LineRelation] = field(default_factory=list)
    closed_blocks: list[DialogueBlock] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("context window size must be >= 1")
        self.lines = deque(maxlen=self.size)

    def previous(self, distance: int = 1) -> ClassifiedLine | None:
        """Return the line ``distance`` steps back, or None if not buffered."""
        if distance < 1 or distance > len(self.lines):
            return None
        return self.lines[-distance]

    def find(self, line_index: int) -> ClassifiedLine | None:
        for line in self.lines:
            if line.line_index == line_index:
                return line
        return None

    @property
    def speaker_unresolved(self) -> bool:
        """True when a character cue opened a block that has no speech yet."""
        return self.active_block is not None and not self.active_block.has_speech


def create_context_window(size: int = DEFAULT_WINDOW_SIZE) -> ContextWindow:
    """Return an empty window with no active block and no relations."""
    return ContextWindow(size=size)


def push_line(window: ContextWindow, line: ClassifiedLine) -> ContextWindow:
    """Append ``line`` to the history, evicting the oldest entry on overflow."""
    last = window.previous()
    if last is not None and line.line_index <= last.line_index:
        raise ValueError(f"line index {line.line_index} does not follow {last.line_index}")
    window.lines.append(line)
    return window


def _close_active_block(window: ContextWindow) -> None:
    if window.active_block is not None:
        window.closed_blocks.append(window.active_block)
        window.active_block = None


def track_dialogue_block(window: ContextWindow, line: ClassifiedLine) -> ContextWindow:
    """Open, extend or close the dialogue block according to ``line``'s type."""
    if line.assigned_type is LineType.CHARACTER:
        previous_block = window.active_block or (window.closed_blocks[-1] if window.closed_blocks else None)
        _close_active_block(window)
        if previous_block is not None:
            add_line_relation(
                window,
                previous_block.character_line_index,
                line.line_index,
                RelationKind.SPEAKER_CHANGE,
            )
        match = CHARACTER_CUE_RE.match(line.normalized or line.text)
        name = match.group("name").strip() if match else (line.normalized or line.text).rstrip(":").strip()
        window.active_block = DialogueBlock(
            start_index=line.line_index,
            end_index=line.line_index,
            character_line_index=line.line_index,
            character_name=name,
        )
    elif line.assigned_type in _BLOCK_MEMBERS and window.active_block is not None:
        window.active_block.extend_to(line.line_index)
    else:
        _close_active_block(window)
    return window


def add_line_relation(
    window: ContextWindow,
    from_index: int,
    to_index: int,
    kind: RelationKind,
    detail: str = "",
) -> ContextWindow:
    """Append a relation record; existing records are never modified."""
    window.relations.append(LineRelation(from_index, to_index, RelationKind(kind), detail))
    return window


def get_active_dialogue_block(window: ContextWindow) -> DialogueBlock | None:
    return window.active_block


def update_confidence(window: ContextWindow, line_index: int, delta: float) -> ContextWindow:
    """Shift a buffered line's confidence by ``delta``, clamped to ``[0, 1]``.

    Lines that already left the window are not touched.
    """
    line = window.find(line_index)
    if line is not None and not line.reviewed:
        line.confidence = min(1.0, max(0.0, line.confidence + delta))
    return window


def close_window(window: ContextWindow) -> ContextWindow:
    """Close any open dialogue block at the end of the document."""
    _close_active_block(window)
    return window


def detect_pattern(window: ContextWindow, line: ScreenplayLine) -> PatternHints:
    """Combine pattern signals with the last one or two lines into type biases.

    Args:
        window: The run's context window (not modified).
        line: The line about to be classified.

    Returns:
        :class:`PatternHints` with additive biases per :class:`LineType` and
        a human readable note for each bias.
    """
    text = line.normalized
    hints = PatternHints(dialect=detect_dialect(text))
    prev = window.previous(1)
    prev2 = window.previous(2)
    words = len(text.split())
    verb_start = is_action_verb_start(text)
    has_scene_marker = bool(SCENE_TIME_RE.search(text) or SCENE_LOCATION_RE.search(text))

    if verb_start:
        hints.add(LineType.ACTION, 0.1, "action-verb-start")
    if has_pronoun_action(text):
        hints.add(LineType.ACTION, 0.1, "pronoun-action")
    if NEGATION_PLUS_VERB_RE.search(text):
        hints.add(LineType.ACTION, 0.05, "negated-third-person-verb")
    if hints.dialect is not None:
        hints.add(LineType.DIALOGUE, 0.05, f"dialect:{hints.dialect}")

    if prev is None:
        return hints

    if prev.assigned_type is LineType.CHARACTER and not verb_start and words <= 12:
        hints.add(LineType.DIALOGUE, 0.1, "after-character")
    elif prev.assigned_type in _BLOCK_MEMBERS and window.active_block is not None and has_dialogue_cue(text):
        hints.add(LineType.DIALOGUE, 0.05, "dialogue-continuation")

    if prev.assigned_type is LineType.SCENE_HEADER_1 and has_scene_marker:
        split = SCENE_HEADER_SPLIT_RE.match(prev.normalized or prev.text)
        if not (split and split.group(2).strip()):
            hints.add(LineType.SCENE_HEADER_2, 0.1, "location-after-scene-number")
    if prev.assigned_type is LineType.SCENE_HEADER_2 and not verb_start and words <= 6:
        hints.add(LineType.SCENE_HEADER_3, 0.1, "place-after-scene-time")
    if prev.assigned_type is LineType.TRANSITION:
        hints.add(LineType.SCENE_HEADER_1, 0.05, "after-transition")
    if (
        prev2 is not None
        and prev2.assigned_type is LineType.CHARACTER
        and prev.assigned_type is LineType.PARENTHETICAL
        and not verb_start
    ):
        hints.add(LineType.DIALOGUE, 0.1, "after-parenthetical")
    return hints
