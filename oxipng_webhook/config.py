"""
Constants and configuration shared across the application.
"""

import os

SERVICE_NAME = "oxipng-webhook"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

FILE_TTL_SECONDS = 10 * 60        # compressed files stay downloadable for 10 minutes
SWEEP_INTERVAL_SECONDS = 30       # how often expired files are purged from memory
MAX_REQUEST_BODY_BYTES = 5 * 1024 * 1024  # 5 MB cap on the /compress JSON body

# Compressor policy: fixed, not caller-configurable
OXIPNG_BIN = os.getenv("OXIPNG_BIN", "oxipng")
OXIPNG_LEVEL = "4"
OXIPNG_STRIP = "all"

DEFAULT_FILENAME = "image"
OUTPUT_MIME_TYPE = "image/png"


def _optional_seconds(name: str) -> float | None:
    value = os.getenv(name)
    if not value:
        return None
    return float(value)


# Unset means "wait forever", which is how the service has always behaved
FETCH_TIMEOUT_SECONDS = _optional_seconds("FETCH_TIMEOUT_SECONDS")
COMPRESS_TIMEOUT_SECONDS = _optional_seconds("COMPRESS_TIMEOUT_SECONDS")
