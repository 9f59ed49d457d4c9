"""
Error taxonomy for the webhook.

Every error carries the HTTP status it maps to; the handlers registered in
``oxipng_webhook/__init__.py`` turn them into ``{"error": "<message>"}``.
"""


class WebhookError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = 500


class DownloadError(WebhookError):
    """The source image could not be fetched or the host returned an error status."""


class UnsupportedMediaError(WebhookError):
    """The source declared a content type other than PNG."""

    status_code = 415


class CompressionError(WebhookError):
    """oxipng could not be started, crashed, timed out or exited non-zero."""


class NotFoundError(WebhookError):
    """No live file exists for the requested identifier."""

    status_code = 404


class UnauthorizedError(WebhookError):
    """The shared secret is configured and the request did not present it."""

    status_code = 401
