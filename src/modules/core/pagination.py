"""Page/limit pagination rendered inside the response envelope.

``?page=`` is 1-based; invalid or non-positive values fall back to 1.
``?limit=`` defaults to ``DEFAULT_PAGE_SIZE`` and is clamped to
``MAX_PAGE_SIZE``.  A page past the end yields an empty ``data`` list
with the correct totals instead of a 404.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional

from django.conf import settings
from django.db import transaction
from rest_framework.pagination import BasePagination
from rest_framework.request import Request
from rest_framework.response import Response

from modules.core.responses import success_response


def _positive_int(raw: Optional[str], fallback: int) -> int:
    try:
        value = int(raw) if raw is not None else fallback
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


class StandardResultsSetPagination(BasePagination):
    page_query_param = "page"
    limit_query_param = "limit"

    def __init__(self) -> None:
        self.page = 1
        self.limit = settings.DEFAULT_PAGE_SIZE
        self.total = 0

    def paginate_queryset(
        self, queryset: Any, request: Request, view: Any = None
    ) -> List[Any]:
        self.page = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.limit = min(
            _positive_int(
                request.query_params.get(self.limit_query_param),
                settings.DEFAULT_PAGE_SIZE,
            ),
            settings.MAX_PAGE_SIZE,
        )
        offset = (self.page - 1) * self.limit

        # Count and window read from the same snapshot.
        with transaction.atomic():
            self.total = queryset.count()
            return list(queryset[offset : offset + self.limit])

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def get_paginated_response(self, data: Any) -> Response:
        return success_response(
            data,
            pagination={
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "totalPages": self.total_pages,
            },
        )

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "totalPages": {"type": "integer"},
                    },
                },
            },
        }
