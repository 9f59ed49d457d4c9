"""
Fetch → stage → oxipng → publish, for a single request.
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from oxipng_webhook import compressor
from oxipng_webhook.config import FILE_TTL_SECONDS, OUTPUT_MIME_TYPE
from oxipng_webhook.fetch import fetch_png
from oxipng_webhook.staging import remove_staged, staging_paths
from oxipng_webhook.store import ExpiringObjectStore

logger = logging.getLogger(__name__)


@dataclass
class CompressionResult:
    file_id: str
    bytes_in: int
    bytes_out: int


async def compress_from_url(
    client: httpx.AsyncClient,
    store: ExpiringObjectStore,
    url: str,
) -> CompressionResult:
    """Compress the PNG at ``url`` and publish it in ``store``.

    Raises DownloadError, UnsupportedMediaError or CompressionError; staged
    files are removed whichever way this exits.
    """
    source = await fetch_png(client, url)

    input_path, output_path = staging_paths()
    try:
        await asyncio.to_thread(input_path.write_bytes, source)
        await compressor.run_oxipng(input_path, output_path)
        compressed = await asyncio.to_thread(output_path.read_bytes)
    finally:
        await remove_staged(input_path, output_path)

    file_id = store.insert(compressed, OUTPUT_MIME_TYPE, FILE_TTL_SECONDS)
    logger.info(
        "Published %s: %d → %d bytes, expires in %ds",
        file_id, len(source), len(compressed), FILE_TTL_SECONDS,
    )
    return CompressionResult(file_id=file_id, bytes_in=len(source), bytes_out=len(compressed))
