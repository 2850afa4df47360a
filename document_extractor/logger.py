"""Logging helpers shared by the extraction pipelines.

Log lines are plain text. Structured fields go in ``extra_data`` and are
rendered after the message as ``[key=value, ...]``; while a request context
is active its ID is added to every line as ``request_id``.

The library never configures the root logger on its own. Applications call
``setup_logging`` once at start-up.
"""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Set by request_context() for one extraction run
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def render_fields(fields: Optional[dict[str, Any]]) -> str:
    """Render ``{"a": 1, "b": 2}`` as `` [a=1, b=2]``; empty input renders as ``""``."""
    if not fields:
        return ""
    return " [" + ", ".join(f"{key}={value}" for key, value in fields.items()) + "]"


class ContextLogger:
    """Thin wrapper over ``logging.Logger`` taking an ``extra_data`` dict per call."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        if not self.logger.isEnabledFor(level):
            return

        fields = dict(extra_data or {})
        request_id = request_id_var.get()
        if request_id:
            fields["request_id"] = request_id

        self.logger.log(level, msg + render_fields(fields), **kwargs)

    def debug(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, msg, extra_data, **kwargs)

    def info(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, msg, extra_data, **kwargs)

    def warning(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, msg, extra_data, **kwargs)

    def error(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.ERROR, msg, extra_data, **kwargs)


def setup_logging(log_level: str = "INFO") -> None:
    """Route all log output to stdout at ``log_level``.

    Existing root handlers are replaced, so calling this twice does not
    duplicate lines. Unknown level names fall back to INFO.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(stdout_handler)
    root_logger.setLevel(level)


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name))


@contextmanager
def request_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Tag log lines inside the block with ``request_id`` (a fresh UUID if omitted)."""
    token = request_id_var.set(request_id or str(uuid.uuid4()))
    try:
        yield request_id_var.get()
    finally:
        request_id_var.reset(token)


class Timer:
    """Measures a block in whole milliseconds.

    ``get_elapsed_ms()`` can be read inside the block for a running total.
    """

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.elapsed_ms: Optional[int] = None

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = self._since_start()

    def _since_start(self) -> int:
        if self.start_time is None:
            return 0
        return int((time.perf_counter() - self.start_time) * 1000)

    def get_elapsed_ms(self) -> int:
        if self.elapsed_ms is not None:
            return self.elapsed_ms
        return self._since_start()
