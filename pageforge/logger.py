from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_session_id: ContextVar[str] = ContextVar("session_id", default="-")
_page_id: ContextVar[str] = ContextVar("page_id", default="-")


def set_session_id(value: Optional[str] = None) -> str:
    """Set the editing session ID for the current context and return it."""
    sid = value or uuid.uuid4().hex[:12]
    _session_id.set(sid)
    return sid


def get_session_id() -> str:
    return _session_id.get()


def get_page_id() -> str:
    return _page_id.get()


@contextmanager
def page_scope(page_id: str) -> Iterator[str]:
    """Stamp log records emitted inside the block with ``page_id``.

    The previous page id is restored on exit.
    """
    token = _page_id.set(page_id)
    try:
        yield page_id
    finally:
        _page_id.reset(token)


class EditingContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()
        record.page_id = _page_id.get()
        return True


def get_logger(name: str = "pageforge", level: int = logging.INFO) -> logging.Logger:
    """Return a logger stamped with the editing session and the page being edited.

    Handlers are attached once per logger name; records from child loggers
    such as ``pageforge.actions`` go through the same handler.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [sid=%(session_id)s page=%(page_id)s] %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        handler.addFilter(EditingContextFilter())
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
