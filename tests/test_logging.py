import asyncio
import json
import logging

import pytest

from recipe_api.framework.logging import (
    Span,
    current_trace_id,
    log_error,
    log_event,
    logger,
)
from recipe_api.framework.tracing import traced


def events(caplog):
    return [
        json.loads(r.getMessage()) for r in caplog.records if r.name == logger.name
    ]


def test_log_event_payload(caplog):
    token = current_trace_id.set("trace-abc")
    try:
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_event("recipe_created", recipe_id="r1")
    finally:
        current_trace_id.reset(token)

    (payload,) = events(caplog)
    assert payload["event"] == "recipe_created"
    assert payload["recipe_id"] == "r1"
    assert payload["trace_id"] == "trace-abc"
    assert "ts" in payload


def test_span_logs_start_and_end(caplog):
    with caplog.at_level(logging.INFO, logger=logger.name):
        with Span("outer"):
            with Span("inner"):
                pass

    names = [p["event"] for p in events(caplog)]
    assert names == [
        "span_start_outer",
        "span_start_inner",
        "span_end_inner",
        "span_end_outer",
    ]
    inner_start = events(caplog)[1]
    assert inner_start["spans"] == ["outer"]


def test_span_records_error(caplog):
    with caplog.at_level(logging.INFO, logger=logger.name):
        with pytest.raises(KeyError):
            with Span("failing"):
                raise KeyError("x")

    end = events(caplog)[-1]
    assert end["event"] == "span_end_failing"
    assert end["error"] == "KeyError"


def test_log_error_is_error_level(caplog):
    with caplog.at_level(logging.INFO, logger=logger.name):
        try:
            raise RuntimeError("db down")
        except RuntimeError:
            log_error("storage_error", operation="ping")

    (record,) = [r for r in caplog.records if r.name == logger.name]
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None


def test_traced_keeps_function_name():
    @traced
    async def lookup():
        return 42

    assert lookup.__name__ == "lookup"
    assert asyncio.run(lookup()) == 42
