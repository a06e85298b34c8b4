"""Logging utilities shared by the classifier, review client and API.

Configuration comes from the environment:

- ``ASC_LOG_LEVEL``: root level name (``TRACE``, ``DEBUG``, ``INFO``...), default ``INFO``.
- ``ASC_LOG_DIR``: when set, daily-rotated ``asc.log`` (INFO+) and
  ``asc-debug.log`` (everything) files are written there.
"""

from __future__ import annotations

import inspect
import logging
import os
from collections.abc import Callable
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

TRACE_LEVEL = 5
if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")


def _trace(self: logging.Logger, msg: str, *args: object, **kwargs: object) -> None:  # pragma: no cover
    if self.isEnabledFor(TRACE_LEVEL):  # pragma: no branch
        self._log(TRACE_LEVEL, msg, args, **kwargs)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s | %(message)s"


def _level_from_env() -> int:
    level_name = os.getenv("ASC_LOG_LEVEL", "INFO").upper()
    if level_name == "TRACE":
        return TRACE_LEVEL
    return getattr(logging, level_name, logging.INFO)


def _rotating_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = TimedRotatingFileHandler(path, when="midnight", backupCount=7, encoding="utf-8")
    handler.setFormatter(fmt)
    handler.setLevel(level)
    return handler


def setup_logging(force: bool = False) -> None:
    """Configure the ``asc`` logger tree once (unless ``force=True``)."""
    if getattr(setup_logging, "_configured", False) and not force:
        return
    root = logging.getLogger("asc")
    if force:  # pragma: no cover
        for h in list(root.handlers):
            root.removeHandler(h)
    level = _level_from_env()
    root.setLevel(level)
    fmt = logging.Formatter(DEFAULT_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(level)
    root.addHandler(console)
    log_dir = os.getenv("ASC_LOG_DIR")
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_handler(path / "asc.log", logging.INFO, fmt))
        root.addHandler(_rotating_handler(path / "asc-debug.log", TRACE_LEVEL, fmt))
    setup_logging._configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Return a logger ensuring configuration executed."""
    setup_logging()
    return logging.getLogger(name)


P = ParamSpec("P")
R = TypeVar("R")


def log_call(
    level: int = logging.DEBUG,
) -> Callable[[Callable[P, Any]], Callable[P, Any]]:
    """Decorator factory logging enter/exit of (a)sync functions."""

    def _decorator(fn: Callable[P, Any]) -> Callable[P, Any]:
        logger = get_logger(fn.__module__)

        def _enter(args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
            if logger.isEnabledFor(level):
                logger.log(level, "ENTER %s args=%s kwargs=%s", fn.__qualname__, _shorten(args), _shorten(kwargs))

        def _exit(result: Any) -> None:
            if logger.isEnabledFor(level):
                logger.log(level, "EXIT %s -> %s", fn.__qualname__, _shorten(result))

        if inspect.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                _enter(args, kwargs)
                try:
                    result = await fn(*args, **kwargs)
                except Exception as e:  # noqa: BLE001
                    logger.exception("ERROR in %s: %s", fn.__qualname__, e)
                    raise
                _exit(result)
                return result

            return async_wrapper

        @wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            _enter(args, kwargs)
            try:
                result = fn(*args, **kwargs)
            except Exception as e:  # noqa: BLE001
                logger.exception("ERROR in %s: %s", fn.__qualname__, e)
                raise
            _exit(result)
            return result

        return sync_wrapper

    return _decorator


def _shorten(obj: object, limit: int = 120) -> str:
    """Return a truncated repr for logging (never raises)."""
    try:  # pragma: no cover
        s = repr(obj)
        if len(s) > limit:
            return s[: limit - 3] + "..."
        return s
    except Exception:  # noqa: BLE001
        return type(obj).__name__
