"""Error taxonomy of the gateway and the FastAPI handlers that shape it into responses."""

import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Unknown error"
NO_SUCH_KEY_CODES = {"NoSuchKey", "NotFound", "404"}


class GatewayError(Exception):
    """Base class for every failure the gateway turns into an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(GatewayError):
    """The request is malformed or has a shape no handler accepts."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(GatewayError):
    """The requested object does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Object Not Found"


class MethodNotAllowed(GatewayError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class PayloadTooLarge(GatewayError):
    """A single-shot upload went over the size ceiling."""

    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_message = "File too large. Use multipart upload for files over 100MB."


class UpstreamError(GatewayError):
    """A call to the backend object store failed."""


class UnknownError(GatewayError):
    """Anything that escaped the handlers."""


def translate_backend_error(exc: Exception, missing_is_not_found: bool = False) -> GatewayError:
    """
    Map a botocore failure onto the gateway taxonomy.

    :param exc: the exception raised by a boto3 call.
    :param missing_is_not_found: treat a missing-key error as ``NotFound`` (reads only).
    """
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {}) or {}
        code = error.get("Code", "")
        if missing_is_not_found and code in NO_SUCH_KEY_CODES:
            return NotFound()
        message = error.get("Message") or str(exc)
        return UpstreamError(f"{code}: {message}" if code else message)
    if isinstance(exc, BotoCoreError):
        return UpstreamError(str(exc))
    return UnknownError(str(exc) or None)


def _error_response(exc: GatewayError) -> PlainTextResponse:
    body = exc.message
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        body = f"Error: {exc.message}"
    return PlainTextResponse(content=body, status_code=exc.status_code)


async def handle_gateway_errors(request: Request, exc: GatewayError) -> PlainTextResponse:
    """Shape a taxonomy error into its plain-text response."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}: {exc.message}")
    return _error_response(exc)


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    """Query or body validation failures are malformed requests."""
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    return await handle_gateway_errors(request, InvalidRequest(errors or None))


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Routing failures raised by Starlette itself (unknown method, unknown route)."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return await handle_gateway_errors(request, MethodNotAllowed())
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return await handle_gateway_errors(request, InvalidRequest("Invalid endpoint"))
    return PlainTextResponse(content=str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(UnknownError(str(exc) or None))
