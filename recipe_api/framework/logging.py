import contextvars
import json
import logging
import sys
import time
from datetime import datetime, timezone

from recipe_api.config import get_config

_span_stack = contextvars.ContextVar("span_stack", default=[])
current_trace_id = contextvars.ContextVar("trace_id", default="-")


LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(trace_id)s] %(message)s"
config = get_config()


class TraceIDFilter(logging.Filter):
    """Injects trace_id into log records if available."""

    def filter(self, record):
        record.trace_id = current_trace_id.get() or "-"
        return True


def setup_logging():
    """
    Configure the service logger with a StreamHandler and a custom formatter.
    Also, adds a TraceIDFilter to inject trace_id into log records.
    """
    logger = logging.getLogger(config.title)
    logger.setLevel(config.logLevel.upper())

    # reloading this module must not stack handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(TraceIDFilter())
        logger.addHandler(handler)

    return logger


logger = setup_logging()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_span(event: str, **fields):
    """
    Logs a structured span event.
    A span represents an operation or unit of work within a trace.
    It automatically includes the current trace ID, span stack and timestamp.
    """
    payload = {
        "ts": _now(),
        "trace_id": current_trace_id.get(),
        "event": event,
        "spans": _span_stack.get(),
        **fields,
    }
    logger.info(json.dumps(payload, default=str))


class Span:
    """
    A context manager for logging spans.
    """

    def __init__(self, name):
        self.name = name

    def __enter__(self):
        self.start = time.time()
        log_span(f"span_start_{self.name}", name=self.name)
        stack = _span_stack.get()
        _span_stack.set(stack + [self.name])
        return self

    def __exit__(self, exc_type, exc_val, tb):
        stack = _span_stack.get()[:-1]
        _span_stack.set(stack)
        duration = round((time.time() - self.start) * 1000, 2)
        fields = {"name": self.name, "duration_ms": duration}
        if exc_type is not None:
            fields["error"] = exc_type.__name__
        log_span(f"span_end_{self.name}", **fields)


def log_event(event: str, **data):
    """
    Logs a structured event with additional data.
    The current trace ID is automatically included.
    """
    payload = {
        "ts": _now(),
        "trace_id": current_trace_id.get(),
        "event": event,
        **data,
    }
    logger.info(json.dumps(payload, default=str))


def log_error(event: str, **data):
    """
    Same payload as log_event, at ERROR level with the active traceback.
    """
    payload = {
        "ts": _now(),
        "trace_id": current_trace_id.get(),
        "event": event,
        **data,
    }
    logger.error(json.dumps(payload, default=str), exc_info=True)
