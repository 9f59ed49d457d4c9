"""
Shared mutable state: HTTP client, the file store, and runtime stats.
"""

import asyncio
import time

import httpx

from oxipng_webhook.config import SWEEP_INTERVAL_SECONDS
from oxipng_webhook.store import ExpiringObjectStore

# Shared HTTP client, created once at startup
_http_client: httpx.AsyncClient | None = None

# Compressed files awaiting download. The sweep task is started and
# cancelled by the application lifespan.
object_store = ExpiringObjectStore(sweep_interval=SWEEP_INTERVAL_SECONDS)


class Stats:
    """Thread-safe runtime statistics. All mutations go through async methods that hold the lock."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.started_at = time.time()
        self.compressions_completed = 0
        self.compressions_failed = 0
        self.bytes_in = 0
        self.bytes_out = 0
        self.files_served = 0
        self._errors: list[dict] = []

    async def record_compression(self, *, bytes_in: int, bytes_out: int) -> None:
        """Record a successful compression that was published to the store."""
        async with self._lock:
            self.compressions_completed += 1
            self.bytes_in += bytes_in
            self.bytes_out += bytes_out

    async def record_failure(self, *, url: str, error: str) -> None:
        """Record a compression request that ended in an error response."""
        async with self._lock:
            self.compressions_failed += 1
            self._errors.append({
                "time": time.time(),
                "url": url,
                "error": error,
            })
            self._errors = self._errors[-20:]

    async def record_file_served(self) -> None:
        async with self._lock:
            self.files_served += 1

    def snapshot(self, *, include_errors: bool = False) -> dict:
        """Return current counters as a plain dict for API responses."""
        result = {
            "uptime_seconds": round(time.time() - self.started_at),
            "compressions_completed": self.compressions_completed,
            "compressions_failed": self.compressions_failed,
            "bytes_in": self.bytes_in,
            "bytes_out": self.bytes_out,
            "files_served": self.files_served,
        }
        if include_errors:
            result["recent_errors"] = self._errors[-5:]
        return result


stats = Stats()


def get_http_client() -> httpx.AsyncClient:
    assert _http_client is not None, "HTTP client not initialised"
    return _http_client
