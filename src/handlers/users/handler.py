"""
Lambda handlers for user profiles (create on first sign-in, read, update).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.container import get_container
from core.models.errors import ValidationError as RequestValidationError
from core.models.user import UserCreate, UserUpdate
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import (
    get_path_parameter,
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .service import UserService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

_OPTIONAL_PROFILE_FIELDS = ("fullName", "full_name", "avatarUrl", "avatar_url")


def _require_user_id(event: dict[str, Any]) -> str:
    user_id = (get_path_parameter(event, "id") or "").strip()
    if not user_id:
        raise RequestValidationError(message="User ID is required")
    return user_id


def _invalid_payload(exc: ValidationError, request_id: str | None) -> dict[str, Any]:
    logger.error(
        "Request validation failed",
        extra={"errors": exc.errors()},
    )
    return ResponseBuilder.validation_error(
        message="Invalid request payload",
        details={"errors": sanitize_validation_errors(exc.errors())},
        request_id=request_id,
    )


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def create_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Create a user profile (POST /api/users).

    Called by the client after a successful identity-provider sign-in.
    Blank name and avatar values are stored as null.

    Returns:
        The created User (200); 400 if id or email is missing;
        409 if the id or email already exists
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received user create request",
        extra={"path": event.get("path"), "request_id": request_id},
    )

    body = parse_json_body(event)

    if not body.get("id") or not body.get("email"):
        return ResponseBuilder.bad_request(
            "User ID and email are required",
            request_id=request_id,
        )

    for key in _OPTIONAL_PROFILE_FIELDS:
        if body.get(key) == "":
            body[key] = None

    try:
        request = validate_request(UserCreate, body)
    except ValidationError as exc:
        return _invalid_payload(exc, request_id)

    service = UserService.from_container(get_container())
    user = service.create_user(request)

    return ResponseBuilder.ok(user.to_json())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def get_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Fetch a user profile (GET /api/users/{id}); 404 if absent."""
    user_id = _require_user_id(event)
    logger.info(
        "Received user get request",
        extra={"user_id": user_id, "request_id": getattr(context, "aws_request_id", None)},
    )

    service = UserService.from_container(get_container())
    user = service.get_user(user_id)

    return ResponseBuilder.ok(user.to_json())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def update_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Partially update a user profile (PUT /api/users/{id}).

    Only the fields present in the body are changed; ``updatedAt`` is
    refreshed. Responds 404 if the user does not exist.
    """
    request_id = getattr(context, "aws_request_id", None)
    user_id = _require_user_id(event)
    logger.info(
        "Received user update request",
        extra={"user_id": user_id, "request_id": request_id},
    )

    try:
        request = validate_request(UserUpdate, parse_json_body(event))
    except ValidationError as exc:
        return _invalid_payload(exc, request_id)

    service = UserService.from_container(get_container())
    user = service.update_user(user_id, request)

    return ResponseBuilder.ok(user.to_json())
