import functools
import time
import uuid

from recipe_api.framework.logging import Span, current_trace_id, log_span

TRACE_ID_HEADER = "X-Trace-ID"


def start_request_trace(request):
    """
    Bind the request's trace id (the caller's X-Trace-ID, or a new one) to
    the current context. Returns the id and the token that unbinds it.
    """
    trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
    return trace_id, current_trace_id.set(trace_id)


def request_fields(request) -> dict:
    """
    Fields describing a request once routing has run: the route template
    rather than the raw path, plus the recipe id when the route has one.
    """
    route = request.scope.get("route")
    fields = {
        "method": request.method,
        "route": getattr(route, "path", request.url.path),
    }
    recipe_id = request.path_params.get("recipe_id")
    if recipe_id is not None:
        fields["recipe_id"] = recipe_id
    return fields


async def tracing_middleware(request, call_next):
    """
    Traces one request: logs a `request` span with status and duration and
    echoes the trace id back in the response headers.
    """
    trace_id, token = start_request_trace(request)
    start = time.time()

    try:
        response = await call_next(request)
        log_span(
            "request",
            status=response.status_code,
            duration_ms=round((time.time() - start) * 1000, 2),
            **request_fields(request),
        )
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
    except Exception as exc:
        log_span(
            "request",
            status=500,
            error=type(exc).__name__,
            duration_ms=round((time.time() - start) * 1000, 2),
            **request_fields(request),
        )
        raise
    finally:
        current_trace_id.reset(token)


def traced(fn):
    """
    Runs an async handler inside a Span named after it.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        with Span(fn.__name__):
            return await fn(*args, **kwargs)

    return wrapper
