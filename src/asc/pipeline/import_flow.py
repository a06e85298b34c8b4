"""End-to-end import: decide the path, classify, aggregate, review, merge."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from asc.classifier.line_classifier import ClassificationRun, LineClassifier
from asc.classifier.normalize import LineNormalizer
from asc.classifier.types import ClassifiedLine
from asc.config import AscSettings
from asc.logging_setup import get_logger, log_call
from asc.pipeline.file_open import (
    ActionKind,
    ExtractionResult,
    FileOpenAction,
    ImportMode,
    build_file_open_action,
)
from asc.review.aggregator import SuspicionAggregator
from asc.review.client import HttpReviewClient
from asc.review.contracts import (
    AgentReviewRequestPayload,
    AgentReviewResponsePayload,
    ReviewStatus,
    skipped_response,
)
from asc.review.protocol import (
    MergeOutcome,
    ReviewTransport,
    merge_review_response,
    request_review,
    request_review_async,
)

log = get_logger(__name__)


@dataclass
class ImportResult:
    """Everything produced while importing one file."""

    action: FileOpenAction
    run: ClassificationRun | None = None
    request: AgentReviewRequestPayload | None = None
    response: AgentReviewResponsePayload | None = None
    outcome: MergeOutcome | None = None
    attempts: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def lines(self) -> list[ClassifiedLine]:
        return self.run.lines if self.run is not None else []

    def to_dict(self) -> dict[str, Any]:
        data = self.action.to_dict()
        if self.run is not None:
            data["lines"] = [line.to_dict() for line in self.run.lines]
        if self.outcome is not None:
            data["review"] = {
                "status": self.outcome.status.value,
                "message": self.outcome.message,
                "model": self.outcome.model,
                "latencyMs": self.outcome.latency_ms,
                "applied": len(self.outcome.applied),
                "attempts": self.attempts,
            }
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


class ImportRunner:
    """Run the import flow for extraction results.

    The classifier and aggregator are synchronous; the review call is the only
    step that waits on I/O. Failed review calls are retried ``max_retries``
    times, then the flow finishes with the original classification.
    """

    def __init__(
        self,
        classifier: LineClassifier | None = None,
        aggregator: SuspicionAggregator | None = None,
        transport: ReviewTransport | None = None,
        max_retries: int = 1,
        timeout_s: float | None = 30.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.classifier = classifier or LineClassifier()
        self.aggregator = aggregator or SuspicionAggregator()
        self.transport = transport
        self.max_retries = max_retries
        self.timeout_s = timeout_s

    @classmethod
    def from_settings(cls, settings: AscSettings) -> ImportRunner:
        """Wire a runner from loaded settings; review is off without a base URL."""
        transport = HttpReviewClient(settings.review) if settings.review.enabled else None
        return cls(
            classifier=LineClassifier(settings.classifier, LineNormalizer(settings.normalizer)),
            aggregator=SuspicionAggregator(settings.aggregator),
            transport=transport,
            max_retries=settings.review.max_retries,
            timeout_s=settings.review.timeout_s,
        )

    def close(self) -> None:
        """Release the review transport's resources (its HTTP session)."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @log_call()
    def run(self, extraction: ExtractionResult, mode: ImportMode | str = ImportMode.REPLACE) -> ImportResult:
        """Import ``extraction`` synchronously."""
        result = self._prepare(extraction, mode)
        if result.request is None:
            return result
        response = skipped_response("review disabled") if self.transport is None else None
        attempts = 0
        while response is None or self._should_retry(response, attempts):
            attempts += 1
            response = request_review(result.request, self.transport)  # type: ignore[arg-type]
        return self._finish(result, response, attempts)

    async def run_async(
        self,
        extraction: ExtractionResult,
        mode: ImportMode | str = ImportMode.REPLACE,
    ) -> ImportResult:
        """Import ``extraction``, awaiting the review call.

        Cancelling the awaiting task stops the flow: the review is not retried
        and ``asyncio.CancelledError`` propagates to the caller.
        """
        result = self._prepare(extraction, mode)
        if result.request is None:
            return result
        response = skipped_response("review disabled") if self.transport is None else None
        attempts = 0
        while response is None or self._should_retry(response, attempts):
            attempts += 1
            try:
                response = await request_review_async(
                    result.request,
                    self.transport,  # type: ignore[arg-type]
                    timeout_s=self.timeout_s,
                    propagate_cancel=True,
                )
            except asyncio.CancelledError:
                log.warning("Import cancelled during review attempt %d; not retrying", attempts)
                raise
        return self._finish(result, response, attempts)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _prepare(self, extraction: ExtractionResult, mode: ImportMode | str) -> ImportResult:
        action = build_file_open_action(extraction, mode)
        result = ImportResult(action=action)
        if action.kind is not ActionKind.IMPORT_CLASSIFIED_TEXT:
            log.info("Open pipeline %s (%s)", action.telemetry.open_pipeline, action.kind.value)
            return result
        result.run = self.classifier.classify(action.text)
        result.request = self.aggregator.build_request(result.run.lines)
        return result

    def _should_retry(self, response: AgentReviewResponsePayload, attempts: int) -> bool:
        if response.status is not ReviewStatus.ERROR or attempts > self.max_retries:
            return False
        log.warning("Review attempt %d failed: %s", attempts, response.message)
        return True

    def _finish(self, result: ImportResult, response: AgentReviewResponsePayload, attempts: int) -> ImportResult:
        if result.run is None or result.request is None:
            raise ValueError("nothing was classified for this import")
        result.response = response
        result.attempts = attempts
        result.outcome = merge_review_response(result.run.lines, result.request, response)
        if result.outcome.status in (ReviewStatus.WARNING, ReviewStatus.ERROR):
            result.warnings.append(f"review {result.outcome.status.value}: {result.outcome.message}")
        return result


def import_extraction(
    extraction: ExtractionResult,
    mode: ImportMode | str = ImportMode.REPLACE,
    transport: ReviewTransport | None = None,
) -> ImportResult:
    """Functional wrapper around :meth:`ImportRunner.run`."""
    return ImportRunner(transport=transport).run(extraction, mode)
