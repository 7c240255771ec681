"""Structured logging helpers for adapter runs.

Purpose
    Keep every emission of logging data predictable and contextual without
    forcing applications to adopt a specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active run identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id`` / ``new_trace_id``: bind, clear, or mint identifiers.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``routed_logging``: lets the CLI route records to the
      terminal or a log file for the duration of a command.

System Integration
    Used by adapters and the composition root so all diagnostics of one run
    carry the same trace metadata. The domain layer stays free of logging.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Iterable, Iterator, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("dereplicator_adapter_trace_id", default=None)
"""Identifier of the run currently being executed."""

_LOGGER: Final[logging.Logger] = logging.getLogger("dereplicator_adapter")
_LOGGER.addHandler(logging.NullHandler())

_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(message)s%(context_text)s"


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def new_trace_id() -> str:
    """Mint and bind a short identifier for a fresh run."""

    trace_id = uuid.uuid4().hex[:12]
    bind_trace_id(trace_id)
    return trace_id


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    stage: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for run lifecycle events.

    Inputs
        stage: Name of the run stage being observed (``validated``, ``process_run``...).
        path: Filesystem path associated with the event, if available.
        payload: Optional mapping with extra diagnostic detail.
    Outputs
        dict[str, Any]: Data safe to unpack into :func:`log_*` helpers.

    Examples
    --------
    >>> make_event('result_copied', 'out.tsv', {'bytes': 3})
    {'stage': 'result_copied', 'path': 'out.tsv', 'bytes': 3}
    """

    event: dict[str, Any] = {"stage": stage, "path": path}
    if payload:
        event |= dict(payload)
    return event


@contextmanager
def routed_logging(handlers: Iterable[logging.Handler], level: int) -> Iterator[None]:
    """Route package log records to *handlers* for the duration of the block.

    Why
        The CLI wants terminal or file output for one command without leaving
        handlers behind on the shared logger.
    Side Effects
        Lowers the package logger level to *level* and restores it afterwards;
        handlers are closed on exit.
    """

    attached = list(handlers)
    previous_level = _LOGGER.level
    for handler in attached:
        handler.setLevel(level)
        handler.setFormatter(_ContextFormatter(_FORMAT))
        _LOGGER.addHandler(handler)
    if attached:
        _LOGGER.setLevel(level)
    try:
        yield
    finally:
        for handler in attached:
            _LOGGER.removeHandler(handler)
            handler.close()
        _LOGGER.setLevel(previous_level)


class _ContextFormatter(logging.Formatter):
    """Render the structured ``context`` of a record as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", None) or {}
        pairs = " ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        record.context_text = f" {pairs}" if pairs else ""
        return super().format(record)


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
