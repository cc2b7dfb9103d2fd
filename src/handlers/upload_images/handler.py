"""
Lambda handler responsible for gallery image uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
from core.models.errors import (
    DatabaseError,
    MetadataOperationFailedError,
    StorageError,
    ValidationError,
)
from core.utils.constants import METRICS_NAMESPACE, UPLOAD_FIELD_NAME, USER_ID_HEADER
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_multipart_files
from core.utils.response import ResponseBuilder
from core.utils.validators import get_header

from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle multipart image uploads (POST /api/images/upload).

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=...",
                    "x-user-id": "<optional owner>"},
        "body": "<base64 multipart body>",
        "isBase64Encoded": true
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with ``{"images": [...]}``
        and, when some files were refused, ``"rejected"``
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    files = parse_multipart_files(event, field_name=UPLOAD_FIELD_NAME)
    user_id = (get_header(event, USER_ID_HEADER) or "").strip() or None

    service = UploadService.from_container(get_container())

    try:
        result = service.upload_images(files, user_id=user_id)

    except ValidationError as exc:
        logger.warning(
            "Upload rejected",
            extra={"user_id": user_id, "error_code": exc.error_code},
        )
        metrics.add_metric(name="ImagesRejected", unit=MetricUnit.Count, value=len(files))
        return ResponseBuilder.bad_request(
            exc.message,
            error=exc.error_code,
            details=exc.details or None,
            request_id=request_id,
        )

    except (StorageError, MetadataOperationFailedError, DatabaseError):
        logger.exception(
            "Infrastructure error during image upload",
            extra={"user_id": user_id},
        )
        return ResponseBuilder.internal_error("Failed to upload images", request_id=request_id)

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=len(result.images))
    if result.rejected:
        metrics.add_metric(
            name="ImagesRejected", unit=MetricUnit.Count, value=len(result.rejected)
        )

    body: dict[str, Any] = {"images": [image.to_json() for image in result.images]}
    if result.rejected:
        body["rejected"] = [item.to_json() for item in result.rejected]

    return ResponseBuilder.ok(body)
