"""Decide how an extracted file enters the editor.

Three outcomes are possible for an :class:`ExtractionResult`:

1. ``import-structured-blocks``: the extractor already produced typed blocks
   (e.g. an app payload); they are imported as is and the classifier is
   bypassed.
2. ``reject``: no blocks and no text; the user gets a destructive notice.
3. ``import-classified-text``: the text goes through the line classifier.

The decision is pure: nothing here classifies or performs I/O.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ActionKind",
    "ExtractionResult",
    "FileOpenAction",
    "FileOpenNotice",
    "FileOpenTelemetry",
    "FileType",
    "ImportMode",
    "NoticeVariant",
    "StructuredBlock",
    "build_file_open_action",
]

EMPTY_FILE_TITLE = "ملف فارغ"
EMPTY_FILE_DESCRIPTION = "لم يتم العثور على نص في الملف المحدد."


class FileType(str, enum.Enum):
    DOC = "doc"
    DOCX = "docx"
    TXT = "txt"
    PDF = "pdf"
    FOUNTAIN = "fountain"
    FDX = "fdx"
    APP_PAYLOAD = "app-payload"


class ImportMode(str, enum.Enum):
    """Whether the file replaces the document or is inserted at the cursor."""

    REPLACE = "replace"
    INSERT = "insert"


class ActionKind(str, enum.Enum):
    IMPORT_STRUCTURED_BLOCKS = "import-structured-blocks"
    IMPORT_CLASSIFIED_TEXT = "import-classified-text"
    REJECT = "reject"


class NoticeVariant(str, enum.Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class StructuredBlock:
    """A block already typed by the extractor (``format_id`` is a line type value)."""

    format_id: str
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"formatId": self.format_id, "text": self.text}


@dataclass
class ExtractionResult:
    """What an extraction collaborator hands over for one file."""

    text: str
    file_type: FileType
    method: str
    used_ocr: bool = False
    warnings: list[str] = field(default_factory=list)
    attempts: list[str] = field(default_factory=list)
    structured_blocks: list[StructuredBlock] | None = None
    quality_score: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractionResult:
        """Build from the camelCase wire form.

        Raises:
            ValueError: If ``fileType`` is unknown, required fields are missing
                or ``structuredBlocks`` is not a list of objects.
        """
        missing = [k for k in ("fileType", "method") if k not in data]
        if missing:
            raise ValueError(f"missing fields: {', '.join(missing)}")
        blocks = data.get("structuredBlocks")
        if blocks is not None and (not isinstance(blocks, list) or not all(isinstance(b, dict) for b in blocks)):
            raise ValueError("structuredBlocks must be a list of objects")
        return cls(
            text=str(data.get("text") or ""),
            file_type=FileType(data["fileType"]),
            method=str(data["method"]),
            used_ocr=bool(data.get("usedOcr", False)),
            warnings=[str(w) for w in data.get("warnings") or []],
            attempts=[str(a) for a in data.get("attempts") or []],
            structured_blocks=(
                None
                if blocks is None
                else [StructuredBlock(str(b.get("formatId", "")), str(b.get("text") or "")) for b in blocks]
            ),
            quality_score=data.get("qualityScore"),
        )


@dataclass(frozen=True)
class FileOpenNotice:
    """User-facing message shown after opening a file."""

    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT


@dataclass(frozen=True)
class FileOpenTelemetry:
    open_pipeline: str
    method: str
    source: str
    used_ocr: bool
    warnings: list[str]
    quality_score: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "openPipeline": self.open_pipeline,
            "method": self.method,
            "source": self.source,
            "usedOcr": self.used_ocr,
            "qualityScore": self.quality_score,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class FileOpenAction:
    """The orchestrator's decision for one extraction result."""

    kind: ActionKind
    mode: ImportMode
    notice: FileOpenNotice
    telemetry: FileOpenTelemetry
    text: str = ""
    blocks: list[StructuredBlock] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "mode": self.mode.value,
            "notice": {
                "title": self.notice.title,
                "description": self.notice.description,
                "variant": self.notice.variant.value,
            },
            "telemetry": self.telemetry.to_dict(),
        }
        if self.kind is ActionKind.IMPORT_STRUCTURED_BLOCKS:
            data["blocks"] = [b.to_dict() for b in self.blocks]
        elif self.kind is ActionKind.IMPORT_CLASSIFIED_TEXT:
            data["text"] = self.text
        return data


def mode_label(mode: ImportMode) -> str:
    return "تم فتح" if mode is ImportMode.REPLACE else "تم إدراج"


def _telemetry(extraction: ExtractionResult, source: str, pipeline: str) -> FileOpenTelemetry:
    return FileOpenTelemetry(
        open_pipeline=pipeline,
        method=extraction.method,
        source=source,
        used_ocr=extraction.used_ocr,
        warnings=list(extraction.warnings),
        quality_score=extraction.quality_score,
    )


def _with_warnings(description: str, warnings: list[str], all_warnings: bool) -> str:
    shown = warnings if all_warnings else warnings[:1]
    for warning in shown:
        description += f"\n⚠️ {warning}"
    return description


def build_file_open_action(
    extraction: ExtractionResult,
    mode: ImportMode | str = ImportMode.REPLACE,
) -> FileOpenAction:
    """Choose the import path for ``extraction``.

    Args:
        extraction: Extraction collaborator output.
        mode: ``replace`` or ``insert``.

    Returns:
        :class:`FileOpenAction` describing what the editor should do.
    """
    mode = ImportMode(mode)
    label = mode_label(mode)
    blocks = [
        StructuredBlock(block.format_id, block.text.strip())
        for block in extraction.structured_blocks or []
        if block.text.strip()
    ]

    if blocks:
        description = f"{label} الملف بنجاح\nتم استيراد التنسيق البنيوي مباشرة"
        if extraction.used_ocr:
            description += " (تم استخدام OCR)"
        if extraction.file_type is FileType.APP_PAYLOAD or extraction.method == "app-payload":
            description += "\n(تم استرجاع البنية الأصلية 1:1)"
        return FileOpenAction(
            kind=ActionKind.IMPORT_STRUCTURED_BLOCKS,
            mode=mode,
            notice=FileOpenNotice(label, _with_warnings(description, extraction.warnings, all_warnings=False)),
            telemetry=_telemetry(extraction, "structured-blocks", "structured-direct"),
            blocks=blocks,
        )

    if not extraction.text.strip():
        return FileOpenAction(
            kind=ActionKind.REJECT,
            mode=mode,
            notice=FileOpenNotice(EMPTY_FILE_TITLE, EMPTY_FILE_DESCRIPTION, NoticeVariant.DESTRUCTIVE),
            telemetry=_telemetry(extraction, "extracted-text", "paste-classifier"),
        )

    description = f"{label} الملف بنجاح\nتم تطبيق التصنيف التلقائي"
    if extraction.used_ocr:
        description += " (تم استخدام OCR)"
    if extraction.method == "app-payload":
        description += "\n(لم تتوفر كتل بنيوية قابلة للاسترجاع المباشر)"
    return FileOpenAction(
        kind=ActionKind.IMPORT_CLASSIFIED_TEXT,
        mode=mode,
        notice=FileOpenNotice(label, _with_warnings(description, extraction.warnings, all_warnings=True)),
        telemetry=_telemetry(extraction, "extracted-text", "paste-classifier"),
        text=extraction.text,
    )
