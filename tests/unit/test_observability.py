"""Unit tests for structured logging utilities in ``observability``."""

from __future__ import annotations

import io
import logging

import pytest

from dereplicator_adapter import bind_trace_id, get_logger
from dereplicator_adapter.observability import TRACE_ID, log_debug, log_info, make_event, new_trace_id, routed_logging


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="dereplicator_adapter")
    bind_trace_id("trace-123")
    log_info("run_finished", stage="done", path="results.tsv")
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "stage": "done", "path": "results.tsv"}
    bind_trace_id(None)


def test_new_trace_id_binds_fresh_identifier() -> None:
    first = new_trace_id()
    second = new_trace_id()
    assert first != second
    assert TRACE_ID.get() == second
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("process_run", "/opt/x", {"returncode": 0}) == {
        "stage": "process_run",
        "path": "/opt/x",
        "returncode": 0,
    }
    assert make_event("validated", None) == {"stage": "validated", "path": None}


def test_routed_logging_is_scoped() -> None:
    """Handlers see records only inside the block and are removed afterwards."""

    logger = get_logger()
    previous_level = logger.level
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    with routed_logging([handler], logging.DEBUG):
        log_debug("work_dir_acquired", stage="work_dir_acquired", path="/tmp/w")
    log_debug("after_block", stage="done", path=None)

    text = stream.getvalue()
    assert "work_dir_acquired" in text
    assert "path=/tmp/w" in text
    assert "after_block" not in text
    assert handler not in logger.handlers
    assert logger.level == previous_level
