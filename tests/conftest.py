from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure workspace root is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Ensure src/ is on sys.path so we can import asc.* and api.* without `import src.*` patterns.
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _clean_asc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of the tests."""
    for name in (
        "ASC_CONFIG",
        "ASC_REVIEW_URL",
        "ASC_REVIEW_API_KEY",
        "ASC_REVIEW_TIMEOUT",
        "ASC_REVIEW_RETRIES",
        "ASC_SUSPICION_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)
