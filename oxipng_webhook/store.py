"""
In-memory store for compressed files, keyed by random identifiers.

Each entry expires a fixed time after insertion. Lookups refuse expired
entries on their own, so the periodic sweep only exists to free memory and
its exact timing never affects what callers see.
"""

import asyncio
import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    id: str
    buffer: bytes
    mime_type: str
    expiry: float

    def is_live(self, now: float) -> bool:
        return now < self.expiry


class ExpiringObjectStore:
    """Thread-safe TTL map from opaque id to :class:`StoredObject`.

    ``start()`` schedules the recurring sweep on the running event loop and
    ``stop()`` cancels it; both are driven by the application lifespan.
    """

    def __init__(
        self,
        sweep_interval: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._objects: dict[str, StoredObject] = {}
        self._sweeper: asyncio.Task | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def insert(self, buffer: bytes, mime_type: str, ttl: float) -> str:
        """Store ``buffer`` for ``ttl`` seconds and return its new identifier."""
        with self._lock:
            object_id = secrets.token_hex(8)  # 64 bits
            while object_id in self._objects:
                object_id = secrets.token_hex(8)
            self._objects[object_id] = StoredObject(
                id=object_id,
                buffer=bytes(buffer),
                mime_type=mime_type,
                expiry=self._clock() + ttl,
            )
        return object_id

    def lookup(self, object_id: str) -> StoredObject | None:
        """Return the entry if it exists and has not expired, else None."""
        with self._lock:
            entry = self._objects.get(object_id)
        if entry is None or not entry.is_live(self._clock()):
            return None
        return entry

    def sweep(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, v in self._objects.items() if not v.is_live(now)]
            for k in expired:
                del self._objects[k]
        if expired:
            logger.info("Swept %d expired file(s)", len(expired))
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()

    def start(self) -> None:
        if self._sweeper is None:
            self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
