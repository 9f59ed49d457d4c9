"""
Health check and runtime stats.

GET /
GET /api/stats
"""

from fastapi import APIRouter, Request

from oxipng_webhook.auth import is_authorized
from oxipng_webhook.config import FILE_TTL_SECONDS, SERVICE_NAME
from oxipng_webhook.state import object_store, stats

router = APIRouter()


@router.api_route("/", methods=["GET", "HEAD"])
async def health_check():
    return {"ok": True, "service": SERVICE_NAME}


@router.get("/api/stats", include_in_schema=False)
async def runtime_stats(request: Request):
    """Runtime counters for monitoring.

    Recent error details are only included for callers presenting the
    configured bearer token.
    """
    result = stats.snapshot(include_errors=is_authorized(request))
    result["files_stored"] = len(object_store)
    result["file_ttl_seconds"] = FILE_TTL_SECONDS
    return result
