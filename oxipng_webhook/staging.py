"""
Temporary files for the compressor's input and output.
"""

import asyncio
import logging
import os
import secrets
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def staging_paths() -> tuple[Path, Path]:
    """Return fresh (input, output) paths in the system temp directory."""
    tmp = Path(tempfile.gettempdir())
    return (
        tmp / f"in-{secrets.token_hex(6)}.png",
        tmp / f"out-{secrets.token_hex(6)}.png",
    )


def _remove(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass  # never written, e.g. the compressor failed before producing output


async def remove_staged(*paths: Path) -> list[BaseException]:
    """Delete all ``paths`` concurrently; log and return failures instead of raising."""
    results = await asyncio.gather(
        *(asyncio.to_thread(_remove, p) for p in paths),
        return_exceptions=True,
    )
    failures = []
    for path, result in zip(paths, results):
        if isinstance(result, BaseException):
            logger.warning("Could not remove temporary file %s: %s", path, result)
            failures.append(result)
    return failures
