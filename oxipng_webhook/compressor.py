"""
Run the oxipng binary against a staged file.
"""

import asyncio
import logging
from pathlib import Path

from oxipng_webhook import config
from oxipng_webhook.errors import CompressionError

logger = logging.getLogger(__name__)


def oxipng_args(input_path: Path, output_path: Path) -> list[str]:
    """Command line for a level-4, strip-all-metadata run."""
    return [
        config.OXIPNG_BIN,
        "-o", config.OXIPNG_LEVEL,
        "--strip", config.OXIPNG_STRIP,
        "--out", str(output_path),
        str(input_path),
    ]


async def run_oxipng(input_path: Path, output_path: Path) -> None:
    """Compress ``input_path`` into ``output_path``; raise CompressionError on any failure."""
    args = oxipng_args(input_path, output_path)
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.error("Could not start %s: %s", config.OXIPNG_BIN, exc)
        raise CompressionError(f"Could not start oxipng: {exc}") from exc

    try:
        _, stderr = await asyncio.wait_for(
            proc.communicate(), timeout=config.COMPRESS_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.error("oxipng timed out after %ss on %s", config.COMPRESS_TIMEOUT_SECONDS, input_path)
        raise CompressionError(
            f"oxipng timed out after {config.COMPRESS_TIMEOUT_SECONDS}s"
        )

    if proc.returncode != 0:
        detail = stderr.decode(errors="replace").strip()
        logger.error("oxipng exited with %d: %s", proc.returncode, detail)
        message = f"oxipng failed with exit code {proc.returncode}"
        if detail:
            message = f"{message}: {detail.splitlines()[-1]}"
        raise CompressionError(message)

    logger.info("oxipng wrote %s", output_path)
