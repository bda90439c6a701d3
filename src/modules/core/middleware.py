import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_META = "HTTP_X_REQUEST_ID"
MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: HttpRequest) -> str:
    value = request.META.get(REQUEST_ID_META, "").strip()
    if not value or len(value) > MAX_REQUEST_ID_LENGTH:
        return str(uuid.uuid4())
    return value


class CorrelationIdMiddleware:
    """Tag every request with a correlation ID.

    Uses the client's ``X-Request-ID`` when it is present and of sane
    length, otherwise a fresh UUID4.  The ID is bound to structlog's
    contextvars, so every log line of the request carries it (service
    events such as ``order.assigned`` included), and echoed back on the
    response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _incoming_request_id(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        started = time.monotonic()
        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
        )

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
