"""Tests for the HTTP review transport."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests

from asc.review.client import HttpReviewClient, ReviewClientConfig


def test_client_requires_base_url() -> None:
    with pytest.raises(ValueError):
        HttpReviewClient(ReviewClientConfig())


def test_url_joins_base_and_endpoint() -> None:
    cfg = ReviewClientConfig(base_url="http://localhost:3000/")
    assert cfg.enabled
    assert cfg.url == "http://localhost:3000/api/agent/review"


def test_client_posts_json_and_returns_body() -> None:
    session = MagicMock()
    session.post.return_value.json.return_value = {"status": "skipped"}
    cfg = ReviewClientConfig(base_url="http://review.local", api_key="k", timeout_s=5)
    client = HttpReviewClient(cfg, session=session)

    body = client({"sessionId": "s", "suspiciousLines": []})

    assert body == {"status": "skipped"}
    args, kwargs = session.post.call_args
    assert args[0] == "http://review.local/api/agent/review"
    assert kwargs["json"] == {"sessionId": "s", "suspiciousLines": []}
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Authorization"] == "Bearer k"
    session.post.return_value.raise_for_status.assert_called_once()


def test_client_propagates_http_errors() -> None:
    session = MagicMock()
    session.post.return_value.raise_for_status.side_effect = requests.HTTPError("502")
    client = HttpReviewClient(ReviewClientConfig(base_url="http://review.local"), session=session)
    with pytest.raises(requests.HTTPError):
        client({"suspiciousLines": []})


def test_close_closes_session() -> None:
    session = MagicMock()
    HttpReviewClient(ReviewClientConfig(base_url="http://review.local"), session=session).close()
    session.close.assert_called_once()


def test_post_is_logged_under_asc_tree(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="asc.review.client")
    session = MagicMock()
    session.post.return_value.json.return_value = {"status": "skipped"}
    HttpReviewClient(ReviewClientConfig(base_url="http://review.local"), session=session)({"suspiciousLines": [{}]})
    records = [r for r in caplog.records if r.name == "asc.review.client"]
    assert records and "POST http://review.local/api/agent/review (1 items)" in records[0].getMessage()
