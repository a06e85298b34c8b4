"""Thin HTTP client for the external review service.

The service receives an :class:`AgentReviewRequestPayload` as JSON and
answers with an :class:`AgentReviewResponsePayload`. This client only moves
bytes; validation and the merge policy live in :mod:`asc.review.protocol`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from asc.logging_setup import get_logger

log = get_logger(__name__)

DEFAULT_ENDPOINT = "/api/agent/review"


@dataclass
class ReviewClientConfig:
    """Connection settings for :class:`HttpReviewClient`.

    Attributes:
        base_url: Service root, e.g. ``http://localhost:3000``. Empty disables review.
        endpoint: Path appended to ``base_url``.
        api_key: Optional bearer token.
        timeout_s: Request timeout in seconds.
        max_retries: Extra attempts after a failed round-trip.
    """

    base_url: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    api_key: str | None = None
    timeout_s: float = 30.0
    max_retries: int = 1

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"


class HttpReviewClient:
    """Callable transport posting review requests with ``requests``."""

    def __init__(self, config: ReviewClientConfig, session: requests.Session | None = None) -> None:
        if not config.enabled:
            raise ValueError("review client needs a base_url")
        self.cfg = config
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.cfg.api_key:
            headers["Authorization"] = f"Bearer {self.cfg.api_key}"
        return headers

    def __call__(self, payload: dict[str, Any]) -> Any:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            requests.HTTPError: On a non-2xx response.
            requests.RequestException: On connection problems or timeouts.
            ValueError: If the body is not JSON.
        """
        log.debug("POST %s (%d items)", self.cfg.url, len(payload.get("suspiciousLines", [])))
        r = self.session.post(
            self.cfg.url,
            headers=self._headers(),
            json=payload,
            timeout=self.cfg.timeout_s,
        )
        r.raise_for_status()
        return r.json()

    def close(self) -> None:
        self.session.close()
