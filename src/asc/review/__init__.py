"""Suspicion aggregation and the agent review protocol."""

from asc.review.aggregator import AggregatorConfig, SuspicionAggregator, build_review_request
from asc.review.client import HttpReviewClient, ReviewClientConfig
from asc.review.contracts import (
    AgentReviewContextLine,
    AgentReviewDecision,
    AgentReviewRequestPayload,
    AgentReviewResponsePayload,
    AgentSuspiciousLinePayload,
    ReviewStatus,
)
from asc.review.protocol import (
    MergeOutcome,
    merge_review_response,
    parse_review_response,
    request_review,
    request_review_async,
)
from asc.review.report import ReviewReporter, make_review_markdown

__all__ = [
    "AgentReviewContextLine",
    "AgentReviewDecision",
    "AgentReviewRequestPayload",
    "AgentReviewResponsePayload",
    "AgentSuspiciousLinePayload",
    "AggregatorConfig",
    "HttpReviewClient",
    "MergeOutcome",
    "ReviewClientConfig",
    "ReviewReporter",
    "ReviewStatus",
    "SuspicionAggregator",
    "build_review_request",
    "make_review_markdown",
    "merge_review_response",
    "parse_review_response",
    "request_review",
    "request_review_async",
]
