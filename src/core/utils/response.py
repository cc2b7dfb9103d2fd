"""
API Gateway proxy responses for the gallery handlers.

JSON object bodies get ``request_id`` merged in; JSON arrays (the image
list) are sent unchanged and carry the request id only in the
``X-Request-Id`` header.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]
JsonBody = JsonDict | list[Any]

REQUEST_ID_HEADER = "X-Request-Id"


def cors_headers(cors_origin: str | None = None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": cors_origin or CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    @staticmethod
    def json_response(
        status: HTTPStatus,
        body: JsonBody | None = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        headers = {"Content-Type": DEFAULT_CONTENT_TYPE, **cors_headers(cors_origin)}

        payload: JsonBody
        if isinstance(body, list):
            payload = body
        else:
            payload = dict(body or {})
            if request_id:
                payload["request_id"] = request_id

        if request_id:
            headers[REQUEST_ID_HEADER] = request_id

        return {
            "statusCode": status.value,
            "headers": headers,
            "body": json.dumps(payload),
        }

    @staticmethod
    def ok(
        body: JsonBody,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.json_response(
            HTTPStatus.OK, body, request_id=request_id, cors_origin=cors_origin
        )

    @staticmethod
    def no_content(*, cors_origin: str | None = None) -> JsonDict:
        """Empty 204, used to answer CORS preflight requests."""
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": {"Content-Type": DEFAULT_CONTENT_TYPE, **cors_headers(cors_origin)},
            "body": "",
        }

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonBody | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Error envelope: ``{error, message, timestamp, details?, request_id?}``.

        ``error`` defaults to the status name (e.g. ``NOT_FOUND``) when no
        domain error code is given.
        """
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return ResponseBuilder.json_response(
            status, payload, request_id=request_id, cors_origin=cors_origin
        )

    @staticmethod
    def bad_request(
        message: str,
        *,
        error: str | None = None,
        details: JsonBody | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            error=error,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def validation_error(
        *,
        message: str,
        details: JsonBody | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """400 for a request body or path that failed model validation."""
        return ResponseBuilder.bad_request(
            message,
            error=ERROR_CODE_VALIDATION_FAILED,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def not_found(
        message: str = "Resource not found", *, request_id: str | None = None, cors_origin: str | None = None
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.NOT_FOUND, message=message, request_id=request_id, cors_origin=cors_origin
        )

    @staticmethod
    def conflict(
        message: str = "Resource already exists", *, request_id: str | None = None, cors_origin: str | None = None
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.CONFLICT, message=message, request_id=request_id, cors_origin=cors_origin
        )

    @staticmethod
    def internal_error(
        message: str = "Internal server error", *, request_id: str | None = None, cors_origin: str | None = None
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @staticmethod
    def binary_response(
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Base64 body for API Gateway binary media (the ``/uploads`` route)."""
        response_headers = cors_headers(cors_origin)
        response_headers.update(
            {
                "Content-Type": content_type,
                "Content-Length": str(len(content)),
            }
        )
        response_headers.update(headers or {})

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("utf-8"),
            "isBase64Encoded": True,
        }
