"""Request validation utilities."""

import base64
import binascii
import json
from typing import Any, TypeVar

from pydantic import BaseModel

from core.models.errors import FileTooLargeError, InvalidFileTypeError, ValidationError
from core.utils.constants import IMAGE_MIME_PREFIX, get_max_file_size_mb

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        msg = raw_msg.replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "valid string" in msg_lower or "valid integer" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate

    Returns:
        The validated model instance

    Raises:
        pydantic.ValidationError: On validation failure; handlers
            sanitize the errors before responding
    """
    return model.model_validate(data)


def decode_body(event: dict[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway base64 encoding."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Invalid request body encoding",
                details={"encoding": "base64"},
            ) from exc

    return body.encode("utf-8") if isinstance(body, str) else body


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Parse a JSON object body.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    raw = decode_body(event)
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise ValidationError(message="Invalid JSON body: expected an object")

    return body


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup on an API Gateway event."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return None


def get_path_parameter(event: dict[str, Any], name: str) -> str | None:
    path_params = event.get("pathParameters") or {}
    return path_params.get(name)


def validate_image_file(
    *,
    filename: str,
    content_type: str | None,
    size: int,
    max_size: int,
) -> None:
    """Reject a single upload that is not an image or is too large.

    Raises:
        InvalidFileTypeError: If the declared MIME type is not image/*
        FileTooLargeError: If size exceeds max_size bytes
    """
    if not (content_type or "").lower().startswith(IMAGE_MIME_PREFIX):
        raise InvalidFileTypeError(
            message=f"{filename} is not an image file",
            details={"filename": filename, "mime_type": content_type},
        )

    if size > max_size:
        raise FileTooLargeError(
            message=f"{filename} is larger than {get_max_file_size_mb(max_size)}MB",
            details={"filename": filename, "size": size, "max_size": max_size},
        )
