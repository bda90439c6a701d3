"""Shared error taxonomy and the DRF exception handler.

Domain exceptions raised by the service layers derive from
``DomainError`` and carry a stable machine-readable ``code`` plus the
HTTP status the API layer maps them to.  Views catch ``DomainError``
explicitly; ``envelope_exception_handler`` covers everything DRF raises
on its own (authentication, parsing, throttling) and unexpected errors,
so no response ever leaves without the envelope.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations surfaced to API clients."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(DomainError):
    """Malformed or out-of-range input; always client-fixable."""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"

    @classmethod
    def from_pydantic(cls, exc: Any) -> ValidationFailed:
        """Build from a ``pydantic.ValidationError``, one detail per field."""
        details = [
            {
                "field": ".".join(str(p) for p in err["loc"]) or "body",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return cls(details=details)


class Forbidden(DomainError):
    """The principal's role or relationship does not permit the intent."""

    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


_DRF_CODES: dict[type[drf_exceptions.APIException], str] = {
    drf_exceptions.NotAuthenticated: "UNAUTHORIZED",
    drf_exceptions.AuthenticationFailed: "UNAUTHORIZED",
    drf_exceptions.PermissionDenied: "FORBIDDEN",
    drf_exceptions.NotFound: "NOT_FOUND",
    drf_exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    drf_exceptions.UnsupportedMediaType: "UNSUPPORTED_MEDIA_TYPE",
    drf_exceptions.ParseError: "VALIDATION_ERROR",
    drf_exceptions.ValidationError: "VALIDATION_ERROR",
    drf_exceptions.Throttled: "THROTTLED",
}


def _code_for(exc: drf_exceptions.APIException) -> str:
    for exc_class, code in _DRF_CODES.items():
        if isinstance(exc, exc_class):
            return code
    return str(exc.default_code).upper()


def envelope_exception_handler(exc: Exception, context: dict) -> Response:
    """DRF ``EXCEPTION_HANDLER`` producing the ``{success: false}`` envelope."""
    from modules.core.responses import domain_error_response, error_body

    if isinstance(exc, DomainError):
        return domain_error_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "api.unhandled_exception",
            view=view.__class__.__name__ if view else None,
            error_type=exc.__class__.__name__,
        )
        return Response(
            error_body("INTERNAL_ERROR", "An unexpected error occurred"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code = _code_for(exc)
    if isinstance(exc, drf_exceptions.ValidationError):
        body = error_body(code, "Invalid request data", details=response.data)
    else:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        body = error_body(code, str(detail or exc))
    response.data = body
    return response
