"""
Serve compressed files from the in-memory store.

GET /files/{file_id}
"""

from fastapi import APIRouter
from fastapi.responses import Response

from oxipng_webhook.errors import NotFoundError
from oxipng_webhook.state import object_store, stats

router = APIRouter()


@router.get("/files/{file_id}", name="download_file")
async def download_file(file_id: str):
    """Return the compressed bytes, or 404 once the link has expired."""
    entry = object_store.lookup(file_id)
    if entry is None:
        raise NotFoundError("Not found or expired")
    await stats.record_file_served()
    return Response(content=entry.buffer, media_type=entry.mime_type)
