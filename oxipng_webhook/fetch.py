"""
Download the source image for a compression request.
"""

import logging

import httpx

from oxipng_webhook.errors import DownloadError, UnsupportedMediaError

logger = logging.getLogger(__name__)


def is_png(content_type: str) -> bool:
    # Trusts the declared header; the bytes themselves are not inspected.
    return "png" in content_type.lower()


async def fetch_png(client: httpx.AsyncClient, url: str) -> bytes:
    """GET ``url`` and return its body, provided the host says it's a PNG.

    The content type is checked from the response headers, so a non-PNG
    body is never read.
    """
    logger.info("Fetching source image %s", url)
    try:
        async with client.stream("GET", url) as resp:
            if not resp.is_success:
                raise DownloadError(f"Download failed: {resp.status_code}")
            content_type = resp.headers.get("content-type", "application/octet-stream")
            if not is_png(content_type):
                logger.warning("Rejected %s with content type %s", url, content_type)
                raise UnsupportedMediaError("Only PNG is supported (Oxipng).")
            body = await resp.aread()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Network error fetching %s: %s", url, exc)
        raise DownloadError(f"Download failed: {exc}") from exc

    logger.info("Fetched %d bytes from %s", len(body), url)
    return body
