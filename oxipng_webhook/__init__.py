"""
oxipng webhook

A FastAPI service that losslessly recompresses a remote PNG with oxipng and
serves the result from memory for ten minutes.

Endpoints:
    POST /compress          - Compress the PNG at a URL, returns a temporary link
    GET  /files/{file_id}   - Download a compressed file
    GET  /                  - Health check
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

# Load .env before any app modules that read os.getenv() at import time (e.g. auth.py)
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from oxipng_webhook import state  # noqa: E402
from oxipng_webhook.config import FETCH_TIMEOUT_SECONDS, MAX_REQUEST_BODY_BYTES  # noqa: E402
from oxipng_webhook.errors import NotFoundError, WebhookError  # noqa: E402
from oxipng_webhook.routes import compress, files, monitoring  # noqa: E402

# Sentry error tracking, only active when DSN is configured
if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        traces_sample_rate=0.2,
        environment=os.getenv("SENTRY_ENV", "production"),
    )

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
    state._http_client = httpx.AsyncClient(timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True)
    state.object_store.start()
    yield
    await state.object_store.stop()
    await state._http_client.aclose()
    state._http_client = None


app = FastAPI(
    title="oxipng webhook",
    description=(
        "Losslessly recompresses a PNG fetched from a URL and serves the "
        "result from a temporary download link."
    ),
    version="1.0.0",
    lifespan=_lifespan,
)


# ── Error responses ──────────────────────────────────────────────────────
@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return PlainTextResponse(str(exc), status_code=exc.status_code)


@app.exception_handler(WebhookError)
async def _webhook_error(request: Request, exc: WebhookError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"error": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


# ── Request body limit ───────────────────────────────────────────────────
class _BodySizeLimitMiddleware:
    """Reject request bodies over max_bytes, whether declared up front or streamed."""

    def __init__(self, app, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        detail = f"Request body exceeds the {self.max_bytes // (1024 * 1024)} MB limit."
        declared = Request(scope).headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_bytes:
            response = JSONResponse({"error": detail}, status_code=413)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    # FastAPI re-raises HTTPException from body reads unchanged
                    raise HTTPException(status_code=413, detail=detail)
            return message

        await self.app(scope, limited_receive, send)

app.add_middleware(_BodySizeLimitMiddleware, max_bytes=MAX_REQUEST_BODY_BYTES)


# ── Security headers ─────────────────────────────────────────────────────
class _SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

app.add_middleware(_SecurityHeadersMiddleware)

# ── Include routers ──────────────────────────────────────────────────────
app.include_router(compress.router)
app.include_router(files.router)
app.include_router(monitoring.router)
