"""Line classifier package exports."""

from asc.classifier.context_window import (
    ContextWindow,
    DialogueBlock,
    LineRelation,
    PatternHints,
    RelationKind,
    add_line_relation,
    create_context_window,
    detect_pattern,
    get_active_dialogue_block,
    track_dialogue_block,
    update_confidence,
)
from asc.classifier.line_classifier import ClassificationRun, ClassifierConfig, LineClassifier, classify_text
from asc.classifier.normalize import LineNormalizer, NormalizerConfig, normalize_line
from asc.classifier.types import ClassifiedLine, LineType, ScreenplayLine, SuspicionFinding

__all__ = [
    "ClassificationRun",
    "ClassifiedLine",
    "ClassifierConfig",
    "ContextWindow",
    "DialogueBlock",
    "LineClassifier",
    "LineNormalizer",
    "LineRelation",
    "LineType",
    "NormalizerConfig",
    "PatternHints",
    "RelationKind",
    "ScreenplayLine",
    "SuspicionFinding",
    "add_line_relation",
    "classify_text",
    "create_context_window",
    "detect_pattern",
    "get_active_dialogue_block",
    "normalize_line",
    "track_dialogue_block",
    "update_confidence",
]
