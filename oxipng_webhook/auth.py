"""
Optional shared-secret authentication for the compress endpoint.
"""

import hmac
import logging
import os

from fastapi import Request

from oxipng_webhook.errors import UnauthorizedError

logger = logging.getLogger(__name__)

# Set TOKEN in env to require "Authorization: Bearer <TOKEN>" on POST /compress.
# If unset, the endpoint is open.
_token: str | None = os.getenv("TOKEN") or None
if not _token:
    logger.info("No TOKEN set — /compress accepts unauthenticated requests")


def bearer_token(request: Request) -> str:
    """Return the bearer credential from the Authorization header, or ''."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return ""
    return header[len("Bearer "):]


def is_authorized(request: Request) -> bool:
    """True when the request carries the configured token."""
    if not _token:
        return False
    token = bearer_token(request)
    return bool(token) and hmac.compare_digest(token.encode(), _token.encode())


def require_token(request: Request) -> None:
    """Raise 401 if TOKEN is configured and the request doesn't carry it."""
    if not _token:
        return  # not configured, endpoint is open
    if not is_authorized(request):
        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        raise UnauthorizedError("Unauthorized")
