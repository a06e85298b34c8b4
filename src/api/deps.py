"""Shared FastAPI dependencies."""

from __future__ import annotations

import os
from functools import lru_cache

from asc.config import AscSettings, load_settings
from asc.pipeline.import_flow import ImportRunner


@lru_cache(maxsize=1)
def get_settings() -> AscSettings:
    """Load settings once from ``ASC_CONFIG`` (if set) plus the environment."""
    return load_settings(os.getenv("ASC_CONFIG") or None)


@lru_cache(maxsize=1)
def get_runner() -> ImportRunner:
    """One runner per process so the review client's connection pool is reused."""
    return ImportRunner.from_settings(get_settings())


def close_runner() -> None:
    """Close the cached runner's review session, if one was created."""
    if get_runner.cache_info().currsize:
        get_runner().close()
        get_runner.cache_clear()
