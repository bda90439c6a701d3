"""Operational endpoints.

``GET /health`` probes the database and the cache; either one failing
turns the answer into 503.  Image storage is reported for information
only: orders still work without it, they just carry no image URLs.
"""

import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger()

CACHE_PROBE_KEY = "_health_check"


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set(CACHE_PROBE_KEY, "ok", 10)
    if cache.get(CACHE_PROBE_KEY) != "ok":
        raise ConnectionError("Cache read failed")


PROBES: Dict[str, tuple[Callable[[], None], tuple[type[BaseException], ...]]] = {
    "database": (_probe_database, (DatabaseError,)),
    # Cache backends raise their own client errors (redis, memcached).
    "cache": (_probe_cache, (Exception,)),
}


def _timed(probe: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    healthy = True

    for name, (probe, errors) in PROBES.items():
        try:
            services[name] = _timed(probe)
        except errors as exc:
            services[name] = {"status": "down"}
            healthy = False
            logger.error("health_check_failure", service=name, error=str(exc))

    services["storage"] = {
        "status": "configured" if settings.AWS_S3_BUCKET else "disabled"
    }

    state = "healthy" if healthy else "unhealthy"
    logger.info("health_check_completed", status=state)

    return JsonResponse(
        {
            "status": state,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
