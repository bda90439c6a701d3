"""Response envelope helpers.

Every API response shares one of two shapes::

    {"success": true, "data": ...}
    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response

from modules.core.exceptions import DomainError


def success_response(
    data: Any, status_code: int = status.HTTP_200_OK, **extra: Any
) -> Response:
    """Wrap *data* in the success envelope; *extra* keys sit beside ``data``."""
    return Response({"success": True, "data": data, **extra}, status=status_code)


def error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def error_response(
    code: str,
    message: str,
    status_code: int,
    details: Optional[Any] = None,
) -> Response:
    return Response(error_body(code, message, details), status=status_code)


def domain_error_response(exc: DomainError) -> Response:
    """Translate a domain exception into the error envelope."""
    return error_response(exc.code, exc.message, exc.status_code, exc.details)
