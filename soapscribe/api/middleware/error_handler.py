"""
Global error handling for the FastAPI application.

Every failure leaves the API as ``{"error": "<message>"}``. Downstream
failures are first classified into a small fixed set of categories, each
with a tailored user-facing message and status code.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from soapscribe.core.exceptions import DownstreamError, MalformedResponseError, SoapScribeError
from soapscribe.core.models import ErrorCategory

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Failed to process audio. Please try again."

# ``{service}`` is filled with the failing service, "OpenAI" by default.
CATEGORY_RESPONSES: dict[ErrorCategory, tuple[int, str]] = {
    ErrorCategory.connection: (
        500,
        "Connection error with {service} API. Please check your internet "
        "connection and API key, then try again.",
    ),
    ErrorCategory.unauthorized: (
        401,
        "Invalid {service} API key. Please check your .env file.",
    ),
    ErrorCategory.file_too_large: (
        400,
        "Audio file is too large. Maximum size is 25 MB. Please record a shorter clip.",
    ),
    ErrorCategory.unsupported_format: (
        400,
        "Invalid audio format. Please try recording again.",
    ),
}

# Free-text fallbacks, checked in order, for errors without a usable status.
_SUBSTRING_RULES: tuple[tuple[ErrorCategory, tuple[str, ...]], ...] = (
    (ErrorCategory.connection, ("ECONNRESET", "Connection error")),
    (ErrorCategory.unauthorized, ("401", "Unauthorized")),
    (ErrorCategory.file_too_large, ("file size", "too large")),
    (ErrorCategory.unsupported_format, ("Invalid file format", "unsupported")),
)

_STATUS_RULES: dict[int, ErrorCategory] = {
    401: ErrorCategory.unauthorized,
    413: ErrorCategory.file_too_large,
    415: ErrorCategory.unsupported_format,
}


def classify_message(message: str) -> ErrorCategory:
    """Classify free error text by substring; ``unknown`` when nothing matches."""
    for category, needles in _SUBSTRING_RULES:
        if any(needle in message for needle in needles):
            return category
    return ErrorCategory.unknown


def classify_downstream_error(exc: DownstreamError) -> ErrorCategory:
    """Classify a downstream failure.

    Structured signals win: a connection failure or a known downstream
    status maps directly. Only otherwise is the error text matched.
    """
    if exc.connection_failed:
        return ErrorCategory.connection
    if exc.upstream_status in _STATUS_RULES:
        return _STATUS_RULES[exc.upstream_status]
    return classify_message(exc.detail)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def category_response(
    category: ErrorCategory, service: str = DownstreamError.default_service
) -> tuple[int, str]:
    """Return the status and user-facing message for a known category."""
    status_code, template = CATEGORY_RESPONSES[category]
    return status_code, template.format(service=service)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers four handlers:
    1. ``DownstreamError``: classified into a tailored message/status.
    2. ``SoapScribeError``: configuration and client input errors as raised.
    3. ``RequestValidationError``: malformed multipart body (400).
    4. ``Exception``: catch-all, classified by message text (500 default).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(DownstreamError)
    async def downstream_error_handler(_request: Request, exc: DownstreamError) -> JSONResponse:
        """Map external-service failures onto the fixed category table."""
        if isinstance(exc, MalformedResponseError):
            logger.error("Malformed downstream response: %s", exc.detail)
            return _error_response(exc.status_code, exc.detail)

        category = classify_downstream_error(exc)
        logger.error(
            "%s from %s (upstream status %s) classified as %s: %s",
            exc.code,
            exc.service,
            exc.upstream_status,
            category,
            exc.detail,
        )
        if category is ErrorCategory.unknown:
            return _error_response(exc.status_code, exc.detail or GENERIC_ERROR_MESSAGE)
        status_code, message = category_response(category, exc.service)
        return _error_response(status_code, message)

    @app.exception_handler(SoapScribeError)
    async def soapscribe_error_handler(_request: Request, exc: SoapScribeError) -> JSONResponse:
        """Convert domain-specific errors into the error envelope."""
        logger.warning("%s: %s", exc.code, exc.detail)
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies."""
        logger.warning("Request validation failed: %s", exc.errors())
        return _error_response(400, f"Invalid request: {exc.errors()}")

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; keeps stack traces from leaking to clients."""
        logger.exception("Error processing audio")
        category = classify_message(str(exc))
        if category is ErrorCategory.unknown:
            return _error_response(500, GENERIC_ERROR_MESSAGE)
        status_code, message = category_response(category)
        return _error_response(status_code, message)
