"""Root logger setup plus a per-task storage key on every record.

Pipelines wrap their work in ``log_context(storage_key=key)``; the filter
installed by ``configure_logging()`` copies the bound values onto each record
so the JSON output carries the key without repeating it in every message.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from docdrop.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(storage_key)s %(message)s"

CONTEXT_DEFAULTS = {"storage_key": "-"}

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("docdrop_log_context", default={})


def get_context() -> dict[str, str]:
    return dict(_LOG_CONTEXT.get())


@contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Bind values to every record logged inside the block (and its threads)."""
    current = _LOG_CONTEXT.get().copy()
    current.update({name: str(value) for name, value in values.items() if value is not None})
    token = _LOG_CONTEXT.set(current)
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in {**CONTEXT_DEFAULTS, **_LOG_CONTEXT.get()}.items():
            setattr(record, name, value)
        return True


def configure_logging() -> None:
    """Configure the root logger based on settings.

    Call once at startup, before the storage backend is built.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(ContextFilter())

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt=JSON_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # Suppress uvicorn access logs; routes log their own outcome.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
