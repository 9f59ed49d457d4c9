"""
Core deliverable: compress a remote PNG and hand back a temporary download link.

POST /compress
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.exceptions import HTTPException
from pydantic import BaseModel, field_validator

from oxipng_webhook.auth import require_token
from oxipng_webhook.compression import compress_from_url
from oxipng_webhook.config import DEFAULT_FILENAME
from oxipng_webhook.errors import WebhookError
from oxipng_webhook.state import get_http_client, object_store, stats

logger = logging.getLogger(__name__)

router = APIRouter()


class CompressRequest(BaseModel):
    url: Optional[str] = None
    filename: Optional[str] = None

    @field_validator("filename", mode="before")
    @classmethod
    def filename_as_text(cls, value):
        # Any hint is accepted and used as text; empty ones fall back to the default
        if not value:
            return None
        return value if isinstance(value, str) else str(value)


@router.post(
    "/compress",
    dependencies=[Depends(require_token)],
)
async def compress(
    request: Request,
    payload: Optional[CompressRequest] = Body(None),
):
    """
    Compress a PNG with oxipng and return a temporary public URL to the result.

    **Workflow:**
    1. Downloads the image at `url` (must be served as `image/png`).
    2. Runs `oxipng -o 4 --strip all` on it.
    3. Keeps the result in memory for 10 minutes under `GET /files/{id}`.

    Returns `{"url": ..., "suggestedFilename": ...}`.
    """
    url = payload.url if payload else None
    if not url:
        raise HTTPException(status_code=400, detail="Missing url")

    try:
        result = await compress_from_url(get_http_client(), object_store, url)
    except WebhookError as exc:
        await stats.record_failure(url=url, error=str(exc))
        raise
    except Exception as exc:
        logger.exception("Compression of %s failed unexpectedly", url)
        await stats.record_failure(url=url, error=str(exc))
        raise WebhookError(str(exc)) from exc

    await stats.record_compression(bytes_in=result.bytes_in, bytes_out=result.bytes_out)

    filename = (payload.filename if payload else None) or DEFAULT_FILENAME
    return {
        "url": str(request.url_for("download_file", file_id=result.file_id)),
        "suggestedFilename": f"{filename}.png",
    }
