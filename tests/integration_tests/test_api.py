"""API smoke tests for classification, file-open and review merge."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import close_runner, get_runner, get_settings
from asc.pipeline.import_flow import ImportRunner

client = TestClient(app)

SCRIPT = "مشهد 1\nليل - داخلي\nيدخل الرجل\nعبد\nالله:\nمرحبا\n"


def test_health() -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_classify_returns_lines_and_review_request() -> None:
    r = client.post("/classify", json={"text": SCRIPT, "session_id": "sess-1"})
    assert r.status_code == 200
    body = r.json()
    assert [ln["lineIndex"] for ln in body["lines"]] == list(range(6))
    assert body["lines"][4]["assignedType"] == "character"
    assert body["counts"]["action"] == 2
    request = body["review_request"]
    assert request["sessionId"] == "sess-1"
    assert [item["lineIndex"] for item in request["suspiciousLines"]] == [3]


def test_open_empty_file_is_rejected() -> None:
    r = client.post("/files/open", json={"extraction": {"text": " ", "fileType": "txt", "method": "plain"}})
    assert r.status_code == 422
    assert r.json()["detail"]["title"] == "ملف فارغ"


def test_open_structured_payload() -> None:
    r = client.post(
        "/files/open",
        json={
            "mode": "insert",
            "extraction": {
                "fileType": "app-payload",
                "method": "app-payload",
                "structuredBlocks": [{"formatId": "character", "text": "أحمد:"}],
            },
        },
    )
    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "import-structured-blocks"
    assert body["blocks"] == [{"formatId": "character", "text": "أحمد:"}]
    assert "lines" not in body


def test_open_text_runs_review_through_runner() -> None:
    def reviewer(payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "status": "applied",
            "decisions": [{"itemIndex": 0, "finalType": "character", "confidence": 0.88, "reason": "اسم مقسوم"}],
        }

    app.dependency_overrides[get_runner] = lambda: ImportRunner(transport=reviewer)
    try:
        r = client.post("/files/open", json={"extraction": {"text": SCRIPT, "fileType": "txt", "method": "plain"}})
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "import-classified-text"
    assert body["review"]["status"] == "applied"
    assert body["lines"][3]["assignedType"] == "character"
    assert body["lines"][3]["reviewReason"] == "اسم مقسوم"


def test_review_merge_applies_and_reports_unknown_items() -> None:
    response = {
        "status": "applied",
        "decisions": [
            {"itemIndex": 0, "finalType": "character", "confidence": 0.9},
            {"itemIndex": 4, "finalType": "dialogue", "confidence": 0.9},
        ],
    }
    r = client.post("/review/merge", json={"text": SCRIPT, "sessionId": "sess-1", "response": response})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "warning"
    assert body["applied"] == [0]
    assert body["ignored"] == [4]
    assert body["lines"][3]["method"] == "agent"


def test_review_merge_malformed_response() -> None:
    r = client.post("/review/merge", json={"text": SCRIPT, "sessionId": "s", "response": {"status": "maybe"}})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "error"
    assert body["applied"] == []
    assert body["lines"][3]["assignedType"] == "action"


def test_runner_is_shared_and_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASC_REVIEW_URL", "http://review.local")
    get_settings.cache_clear()
    get_runner.cache_clear()
    try:
        runner = get_runner()
        assert get_runner() is runner
        session = MagicMock()
        runner.transport.session = session
        close_runner()
        session.close.assert_called_once()
        assert get_runner.cache_info().currsize == 0
    finally:
        get_settings.cache_clear()
        get_runner.cache_clear()
