"""
Error translation for API Gateway Lambda handlers.

Handlers return their own responses for the failures they expect. Anything
that escapes is mapped here: gallery domain errors by type, built-in
exceptions through an ordered rule table, the rest to a generic 500.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from http import HTTPStatus
import traceback
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import (
    ConflictError,
    GalleryServiceError,
    NotFoundError,
    ValidationError,
)
from core.utils.response import JsonDict, ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

GENERIC_SERVER_MESSAGE = "We're experiencing technical difficulties. Please try again in a few moments."

# Messages starting with these are already safe to show to the caller.
_FRIENDLY_PREFIXES = (
    "Invalid",
    "Missing",
    "Required",
    "Must",
    "Cannot",
    "Unable to",
    "Failed to",
    "Image",
    "File",
    "User",
    "No files",
)


@dataclass(frozen=True)
class ErrorRule:
    """Maps built-in exception types to a status and a caller-facing message."""

    exc_types: tuple[type[Exception], ...]
    status: HTTPStatus
    log_message: str
    message: str | None = None
    level: str = "warning"


# First match wins. PermissionError, FileNotFoundError and TimeoutError are
# OSError subclasses and must precede the connection rule.
ERROR_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(
        (ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        "Validation error in handler",
    ),
    ErrorRule(
        (PermissionError,),
        HTTPStatus.FORBIDDEN,
        "Permission denied in handler",
        "You don't have permission to perform this action.",
    ),
    ErrorRule(
        (FileNotFoundError,),
        HTTPStatus.NOT_FOUND,
        "Resource not found",
        "The requested resource was not found.",
    ),
    ErrorRule(
        (TimeoutError,),
        HTTPStatus.GATEWAY_TIMEOUT,
        "Request timeout",
        "The request took too long to process. Please try again.",
        level="exception",
    ),
    ErrorRule(
        (ConnectionError, OSError),
        HTTPStatus.SERVICE_UNAVAILABLE,
        "Connection error",
        "Unable to connect to required services. Please try again later.",
        level="exception",
    ),
)


def _get_user_friendly_message(exc: Exception) -> str:
    """Keep readable validation messages, replace technical ones."""
    text = str(exc)
    if text and text.startswith(_FRIENDLY_PREFIXES):
        return text

    # UnicodeDecodeError is a ValueError subclass, check it first
    if isinstance(exc, (UnicodeDecodeError, UnicodeEncodeError)):
        return "The file contains invalid characters or encoding. Please check the file format."
    if isinstance(exc, ValueError):
        return "The provided data is invalid. Please check your input and try again."
    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."
    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."
    return "We encountered an issue processing your request. Please try again."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def _domain_error_response(
    exc: GalleryServiceError,
    *,
    handler_name: str,
    request_id: str | None,
    cors_origin: str | None,
) -> JsonDict:
    if isinstance(exc, ValidationError):
        _log_error("Validation error in handler", handler_name=handler_name, request_id=request_id, exc=exc)
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details or None,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    if isinstance(exc, NotFoundError):
        _log_error("Resource not found", handler_name=handler_name, request_id=request_id, exc=exc)
        return ResponseBuilder.not_found(exc.message, request_id=request_id, cors_origin=cors_origin)

    if isinstance(exc, ConflictError):
        _log_error("Conflict in handler", handler_name=handler_name, request_id=request_id, exc=exc)
        return ResponseBuilder.conflict(exc.message, request_id=request_id, cors_origin=cors_origin)

    # Storage, database and metadata failures never leak their details
    _log_error(
        "Backing store failure in handler",
        handler_name=handler_name,
        request_id=request_id,
        exc=exc,
        level="exception",
    )
    return ResponseBuilder.internal_error(
        GENERIC_SERVER_MESSAGE, request_id=request_id, cors_origin=cors_origin
    )


def _unexpected_error_response(
    exc: Exception,
    *,
    handler_name: str,
    request_id: str | None,
    cors_origin: str | None,
) -> JsonDict:
    for rule in ERROR_RULES:
        if isinstance(exc, rule.exc_types):
            _log_error(
                rule.log_message,
                handler_name=handler_name,
                request_id=request_id,
                exc=exc,
                level=rule.level,
            )
            return ResponseBuilder.error(
                status=rule.status,
                message=rule.message or _get_user_friendly_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    _log_error(
        "Unexpected error in handler",
        handler_name=handler_name,
        request_id=request_id,
        exc=exc,
        level="exception",
    )
    return ResponseBuilder.internal_error(
        GENERIC_SERVER_MESSAGE, request_id=request_id, cors_origin=cors_origin
    )


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - CORS preflight (OPTIONS) answered without calling the handler
    - Translation of gallery domain errors that escape the handler
    - A status and safe message for any other exception
    - Request ID tracking and structured logging

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"message": "done"})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)
        except GalleryServiceError as exc:
            return _domain_error_response(
                exc,
                handler_name=func.__name__,
                request_id=request_id,
                cors_origin=cors_origin,
            )
        except Exception as exc:
            return _unexpected_error_response(
                exc,
                handler_name=func.__name__,
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
