"""
Lambda handlers for setting and clearing a user's avatar.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
from core.models.errors import StorageError, ValidationError
from core.utils.constants import AVATAR_FIELD_NAME, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_multipart_files
from core.utils.response import ResponseBuilder
from core.utils.validators import get_path_parameter

from .service import AvatarService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


def _require_user_id(event: dict[str, Any]) -> str:
    user_id = (get_path_parameter(event, "id") or "").strip()
    if not user_id:
        raise ValidationError(message="User ID is required")
    return user_id


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Upload a user's avatar (POST /api/users/{id}/avatar).

    Expects exactly one multipart part named ``avatar``. The file must be
    an image no larger than 5MB.

    Returns:
        The updated User; 400 for invalid files; 404 if the user is absent
    """
    request_id = getattr(context, "aws_request_id", None)
    user_id = _require_user_id(event)
    logger.info(
        "Received avatar upload request",
        extra={"user_id": user_id, "request_id": request_id},
    )

    files = parse_multipart_files(event, field_name=AVATAR_FIELD_NAME)

    if not files:
        raise ValidationError(message="No file uploaded")
    if len(files) > 1:
        raise ValidationError(
            message="Only one avatar file may be uploaded",
            details={"count": len(files)},
        )

    service = AvatarService.from_container(get_container())

    try:
        user = service.upload_avatar(user_id, files[0])
    except StorageError:
        logger.exception("Avatar upload failed", extra={"user_id": user_id})
        return ResponseBuilder.internal_error("Failed to upload avatar", request_id=request_id)

    return ResponseBuilder.ok(user.to_json())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def remove_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Clear a user's avatar (DELETE /api/users/{id}/avatar); 404 if absent."""
    user_id = _require_user_id(event)
    logger.info(
        "Received avatar removal request",
        extra={"user_id": user_id, "request_id": getattr(context, "aws_request_id", None)},
    )

    service = AvatarService.from_container(get_container())
    user = service.remove_avatar(user_id)

    return ResponseBuilder.ok(user.to_json())
