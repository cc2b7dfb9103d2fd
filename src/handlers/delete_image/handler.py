"""
Lambda handlers responsible for deleting image resources.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.container import get_container
from core.models.errors import DatabaseError, MetadataOperationFailedError, NotFoundError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import (
    get_path_parameter,
    parse_json_body,
    sanitize_validation_errors,
    validate_request,
)

from .models import BatchDeleteRequest, BatchDeleteResponse, DeleteImageRequest, DeleteOutcome
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests (DELETE /api/images/{id}).

    This function:
    - Extracts the image identifier from API Gateway path parameters
    - Validates the incoming request payload
    - Delegates deletion to the service layer
    - Translates domain and runtime errors into HTTP responses

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        request = validate_request(
            DeleteImageRequest,
            {"image_id": get_path_parameter(event, "id")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = DeleteService.from_container(get_container())

    try:
        service.delete_image(request.image_id)

    except NotFoundError:
        logger.warning(
            "Image not found during delete",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.not_found("Image not found", request_id=request_id)

    except (MetadataOperationFailedError, DatabaseError):
        logger.exception(
            "Deletion failed",
            extra={"image_id": request.image_id},
        )
        return ResponseBuilder.internal_error("Failed to delete image", request_id=request_id)

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok({"message": "Image deleted successfully"})


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def batch_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle bulk deletion (POST /api/images/batch-delete).

    Expected body: ``{"imageIds": ["img_...", ...]}``. Responds with one
    result per distinct id and the number of records removed.
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received batch delete request",
        extra={"path": event.get("path"), "request_id": request_id},
    )

    try:
        request = validate_request(BatchDeleteRequest, parse_json_body(event))
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.validation_error(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = DeleteService.from_container(get_container())

    try:
        outcome = service.delete_images(request.image_ids)
    except DatabaseError:
        logger.exception("Batch deletion failed", extra={"count": len(request.image_ids)})
        return ResponseBuilder.internal_error("Failed to delete images", request_id=request_id)

    response = BatchDeleteResponse(
        results=[DeleteOutcome(id=image_id, deleted=deleted) for image_id, deleted in outcome.items()],
        deleted_count=sum(outcome.values()),
    )

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=response.deleted_count)

    return ResponseBuilder.ok(response.to_json())
