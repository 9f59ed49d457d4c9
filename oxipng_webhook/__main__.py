"""
Run the webhook with uvicorn:

    python -m oxipng_webhook
"""

import logging
import shutil

import uvicorn

from oxipng_webhook import app
from oxipng_webhook.config import HOST, OXIPNG_BIN, PORT

logger = logging.getLogger(__name__)


def main() -> None:
    if shutil.which(OXIPNG_BIN) is None:
        logger.warning("%s not found on PATH — compression requests will fail", OXIPNG_BIN)
    logger.info("oxipng webhook listening on :%d", PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
