"""Centralized logging utilities for flight browser sessions.

Every browsing session writes to its own log file under ``logs/`` and tags each
line with the session identifier. Two timing helpers sit on top of that:

- ``perf``: a decorator timing sync or async callables (the API fetches) and
  logging one structured INFO line with the duration and success state.
- ``perf_span``: a context manager doing the same for an arbitrary block.
"""

import functools
import inspect
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, TextIO

from flight_browser.config import AppConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [session=%(session_id)s] %(message)s"
PERF_MESSAGE = "event=perf name=%s duration_ms=%.3f success=%s tags=%s"


class _SessionContextFilter(logging.Filter):
    """Inject the current session identifier into every log record."""

    def __init__(self, session_id: str) -> None:
        super().__init__()
        self._session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self._session_id
        return True


def _sanitize_session_id(session_id: str) -> str:
    """Convert a session identifier into a filesystem-friendly token."""
    return "".join(ch if ch.isalnum() or ch in ("-", "_") else "-" for ch in session_id)


def generate_session_id() -> str:
    """Return a default session identifier based on the current UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def configure_logging(
    config: AppConfig,
    session_id: Optional[str] = None,
    include_console: bool = True,
    fmt: str = DEFAULT_LOG_FORMAT,
    console_stream: Optional[TextIO] = None,
) -> Path:
    """Install file (and optionally console) handlers on the root logger.

    The console handler writes to ``console_stream``, stdout by default.
    Returns the path of the session log file.
    """
    resolved_session_id = session_id or generate_session_id()
    safe_session_id = _sanitize_session_id(resolved_session_id)

    log_dir = config.log_directory
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{config.app_name}-{safe_session_id}.log"

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    handlers = [logging.FileHandler(log_path, encoding="utf-8")]
    if include_console:
        handlers.append(logging.StreamHandler(console_stream or sys.stdout))

    for handler in handlers:
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(_SessionContextFilter(resolved_session_id))
        root_logger.addHandler(handler)

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    return log_path


def _format_tags(tags: Optional[Mapping[str, Any]]) -> str:
    """Return a stable single-line rendering of ``tags``."""
    if not tags:
        return "{}"
    items = ", ".join(f"{k}={tags[k]!r}" for k in sorted(tags))
    return "{" + items + "}"


def _elapsed_ms(start_ns: int) -> float:
    return (time.monotonic_ns() - start_ns) / 1_000_000.0


def perf(
    name: Optional[str] = None,
    *,
    tags: Optional[Mapping[str, Any]] = None,
    level: int = logging.INFO,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that logs execution time of a function.

    Args:
        name: Optional span name; defaults to ``<module>.<qualname>``.
        tags: Optional mapping of additional metadata to include in the log.
        level: Logging level to use (defaults to ``logging.INFO``).

    Returns:
        A decorator producing a wrapper that logs an ``event=perf`` line with
        the duration in milliseconds and a success flag. Exceptions are
        re-raised unchanged.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        span_name = name or f"{func.__module__}.{func.__qualname__}"
        logger = logging.getLogger(func.__module__)

        def _log(duration_ms: float, success: bool) -> None:
            logger.log(
                level,
                PERF_MESSAGE,
                span_name,
                duration_ms,
                str(success).lower(),
                _format_tags(tags),
            )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start_ns = time.monotonic_ns()
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    _log(_elapsed_ms(start_ns), False)
                    raise
                _log(_elapsed_ms(start_ns), True)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_ns = time.monotonic_ns()
            try:
                result = func(*args, **kwargs)
            except Exception:
                _log(_elapsed_ms(start_ns), False)
                raise
            _log(_elapsed_ms(start_ns), True)
            return result

        return sync_wrapper

    return decorator


class perf_span:
    """Context manager to time an arbitrary code block and log its duration.

    Example:
        with perf_span("views.derive_rows", tags={"view": "list"}):
            controller.rows()
    """

    def __init__(
        self,
        name: str,
        *,
        tags: Optional[Mapping[str, Any]] = None,
        level: int = logging.INFO,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._name = name
        self._tags = tags or {}
        self._level = level
        self._logger = logger or logging.getLogger(__name__)
        self._start_ns: Optional[int] = None

    def __enter__(self) -> "perf_span":
        self._start_ns = time.monotonic_ns()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        start_ns = self._start_ns if self._start_ns is not None else time.monotonic_ns()
        self._logger.log(
            self._level,
            PERF_MESSAGE,
            self._name,
            _elapsed_ms(start_ns),
            str(exc_type is None).lower(),
            _format_tags(self._tags),
        )
        return False


__all__ = [
    "configure_logging",
    "generate_session_id",
    "DEFAULT_LOG_FORMAT",
    "perf",
    "perf_span",
]
