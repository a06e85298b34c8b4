"""Import pipeline: choose the import path and run classification with review."""

from asc.pipeline.file_open import (
    ActionKind,
    ExtractionResult,
    FileOpenAction,
    FileType,
    ImportMode,
    StructuredBlock,
    build_file_open_action,
)
from asc.pipeline.import_flow import ImportResult, ImportRunner, import_extraction

__all__ = [
    "ActionKind",
    "ExtractionResult",
    "FileOpenAction",
    "FileType",
    "ImportMode",
    "ImportResult",
    "ImportRunner",
    "StructuredBlock",
    "build_file_open_action",
    "import_extraction",
]
