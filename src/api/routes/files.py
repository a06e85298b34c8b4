"""File-open endpoint.

Implements:
- POST /files/open: decide the import path for an extraction result and run it
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from api.deps import get_runner
from asc.pipeline.file_open import ActionKind, ExtractionResult, FileType, ImportMode, StructuredBlock
from asc.pipeline.import_flow import ImportRunner

router = APIRouter()


class StructuredBlockIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    format_id: str
    text: str = ""


class ExtractionIn(BaseModel):
    """Extraction result as sent by the extraction collaborators."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str = ""
    file_type: FileType
    method: str
    used_ocr: bool = False
    warnings: list[str] = Field(default_factory=list)
    attempts: list[str] = Field(default_factory=list)
    structured_blocks: list[StructuredBlockIn] | None = None
    quality_score: float | None = None

    def to_extraction(self) -> ExtractionResult:
        return ExtractionResult(
            text=self.text,
            file_type=self.file_type,
            method=self.method,
            used_ocr=self.used_ocr,
            warnings=list(self.warnings),
            attempts=list(self.attempts),
            structured_blocks=(
                None
                if self.structured_blocks is None
                else [StructuredBlock(b.format_id, b.text) for b in self.structured_blocks]
            ),
            quality_score=self.quality_score,
        )


class FileOpenRequest(BaseModel):
    extraction: ExtractionIn
    mode: ImportMode = ImportMode.REPLACE


@router.post("/files/open")
async def open_file(body: FileOpenRequest, runner: ImportRunner = Depends(get_runner)) -> dict[str, Any]:  # noqa: B008
    """Run the import flow; an empty file is answered with 422 and the notice."""
    result = await runner.run_async(body.extraction.to_extraction(), body.mode)
    data = result.to_dict()
    if result.action.kind is ActionKind.REJECT:
        raise HTTPException(status_code=422, detail=data["notice"])
    return data
