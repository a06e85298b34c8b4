"""Context-aware classifier for Arabic screenplay lines.

Usage:
    from asc.classifier.line_classifier import LineClassifier
    run = LineClassifier().classify("مشهد 1\\nليل - داخلي\\nيدخل أحمد الغرفة")
    for line in run.lines:
        print(line.line_index, line.assigned_type.value, line.confidence)

Each call to :meth:`LineClassifier.classify` owns a fresh
:class:`~asc.classifier.context_window.ContextWindow`; the classifier object
itself holds configuration only and can be shared between concurrent runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from asc.classifier.context_window import (
    DEFAULT_WINDOW_SIZE,
    ContextWindow,
    DialogueBlock,
    LineRelation,
    RelationKind,
    add_line_relation,
    close_window,
    create_context_window,
    detect_pattern,
    push_line,
    track_dialogue_block,
    update_confidence,
)
from asc.classifier.diagnostics import (
    check_confidence,
    check_content,
    check_sequence,
    check_split_fragment,
    check_statistics,
)
from asc.classifier.normalize import LineNormalizer, NormalizerConfig
from asc.classifier.rules import (
    RULES,
    Rule,
    RuleContext,
    character_name,
    evaluate_rules,
    scene_header_remainder,
)
from asc.classifier.types import ClassifiedLine, LineType, ScreenplayLine, SuspicionFinding
from asc.logging_setup import get_logger

log = get_logger(__name__)


@dataclass
class ClassifierConfig:
    """Configuration for :class:`LineClassifier`."""

    window_size: int = DEFAULT_WINDOW_SIZE
    max_confidence: float = 0.99
    context_mismatch_bias: float = 0.1
    continuation_boost: float = 0.05
    violation_penalty: float = 0.1


@dataclass
class ClassificationRun:
    """Result of classifying one document."""

    lines: list[ClassifiedLine] = field(default_factory=list)
    dialogue_blocks: list[DialogueBlock] = field(default_factory=list)
    relations: list[LineRelation] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        out: dict[str, int] = {}
        for line in self.lines:
            out[line.assigned_type.value] = out.get(line.assigned_type.value, 0) + 1
        return out


class LineClassifier:
    """Assign a :class:`LineType`, confidence and findings to every line."""

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        normalizer: LineNormalizer | None = None,
        rules: tuple[Rule, ...] = RULES,
    ) -> None:
        self.cfg = config or ClassifierConfig()
        self.normalizer = normalizer or LineNormalizer(NormalizerConfig())
        self.rules = rules

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, text: str) -> ClassificationRun:
        """Classify ``text`` line by line and return the run result."""
        window = create_context_window(self.cfg.window_size)
        lines = [self.classify_line(window, sl) for sl in self.normalizer.iter_lines(text)]
        close_window(window)
        log.debug(
            "Classified %d lines (%d dialogue blocks, %d relations)",
            len(lines),
            len(window.closed_blocks),
            len(window.relations),
        )
        return ClassificationRun(
            lines=lines,
            dialogue_blocks=list(window.closed_blocks),
            relations=list(window.relations),
        )

    def classify_line(self, window: ContextWindow, line: ScreenplayLine) -> ClassifiedLine:
        """Classify one line, updating ``window`` in place."""
        hints = detect_pattern(window, line)
        log.trace("line %d hints: %s", line.line_index, hints.notes)  # type: ignore[attr-defined]
        ctx = RuleContext.build(line, window, hints)
        outcome = evaluate_rules(ctx, self.rules)
        rule = outcome.rule

        confidence = min(self.cfg.max_confidence, rule.weight + hints.bias(rule.line_type))
        current = ClassifiedLine(
            line_index=line.line_index,
            text=line.raw,
            normalized=line.normalized,
            assigned_type=rule.line_type,
            confidence=confidence,
            method=rule.method,
        )
        for finding in outcome.findings:
            current.add_finding(finding)

        strongest = hints.strongest()
        if strongest is not None:
            expected, bias = strongest
            if expected is not rule.line_type and bias >= self.cfg.context_mismatch_bias:
                current.add_finding(SuspicionFinding("context-mismatch", 40, f"expected {expected.value}", expected))

        prev = window.previous()
        if rule.name != "inline-dialogue":
            complete = prev is not None and prev.assigned_type is LineType.SCENE_HEADER_1 and bool(
                scene_header_remainder(prev)
            )
            violation = check_sequence(prev, current, prev_complete=complete)
            if violation is not None:
                current.add_finding(violation)
        for finding in check_content(current):
            current.add_finding(finding)
        for check in (check_statistics, check_confidence):
            finding = check(current)
            if finding is not None:
                current.add_finding(finding)

        self._relate(window, prev, current)

        log.debug(
            "line %d -> %s via %s (conf=%.2f, suspicion=%d)",
            current.line_index,
            current.assigned_type.value,
            rule.name,
            current.confidence,
            current.total_suspicion,
        )
        push_line(window, current)
        track_dialogue_block(window, current)
        return current

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _relate(self, window: ContextWindow, prev: ClassifiedLine | None, current: ClassifiedLine) -> None:
        """Record relations and retroactive confidence changes for ``current``."""
        if prev is None:
            return
        for finding in current.findings:
            if finding.tag == "sequence-violation":
                add_line_relation(
                    window,
                    prev.line_index,
                    current.line_index,
                    RelationKind.SEQUENCE_VIOLATION,
                    finding.detail,
                )
                update_confidence(window, prev.line_index, -self.cfg.violation_penalty)

        if (
            current.assigned_type is LineType.DIALOGUE
            and prev.assigned_type in (LineType.DIALOGUE, LineType.PARENTHETICAL)
            and window.active_block is not None
        ):
            add_line_relation(window, prev.line_index, current.line_index, RelationKind.CONTINUATION)
            update_confidence(window, prev.line_index, self.cfg.continuation_boost)

        if current.assigned_type is LineType.CHARACTER:
            name = character_name(current.normalized)
            fragment = check_split_fragment(prev, name or "")
            if fragment is not None:
                prev.add_finding(fragment)
                log.debug("line %d looks like a split speaker name: %s", prev.line_index, fragment.detail)


def classify_text(text: str, config: ClassifierConfig | None = None) -> list[ClassifiedLine]:
    """Functional wrapper returning only the classified lines."""
    return LineClassifier(config).classify(text).lines
