"""Session ID logging context for tracing a single sales call across modules.

``load_config`` installs ``SessionIdFilter`` on the root handlers and puts
``%(session_id)s`` in the log format, so every line printed during a call
carries the id set by ``CallSession``. Records logged outside a call show
``NO_SESSION``.

Usage:
    from src.logging_context import get_session_logger, set_session_id

    set_session_id("CALL-abc123")
    logger = get_session_logger(__name__)
    logger.info("Quote calculated")
    # 2026-01-05 10:12:03 [src.tools.quotes] [CALL-abc123] INFO: Quote calculated
"""

import logging
from contextvars import ContextVar
from typing import Optional, Union

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def set_session_id(session_id: str) -> None:
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Stamps the current session id onto each record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def add_session_filter(target: Union[logging.Logger, logging.Handler]) -> None:
    """Attach a SessionIdFilter to a logger or handler, at most once."""
    if not any(isinstance(f, SessionIdFilter) for f in target.filters):
        target.addFilter(SessionIdFilter())


def install_session_filter(root: Optional[logging.Logger] = None) -> None:
    """Stamp session ids on every record reaching the root handlers.

    Handler filters see records propagated from any module logger, so a
    format string using ``%(session_id)s`` never hits a missing attribute.
    """
    for handler in (root or logging.getLogger()).handlers:
        add_session_filter(handler)


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached."""
    logger = logging.getLogger(name)
    add_session_filter(logger)
    return logger
