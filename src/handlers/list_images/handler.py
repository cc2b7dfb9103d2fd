"""
Lambda handler responsible for listing gallery images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
from core.models.errors import DatabaseError
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images (GET /api/images).

    Returns every image as a JSON array, newest first. Category and
    search refinement happen in the client over this full list.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image list request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    repository = get_container().repository

    try:
        images = repository.get_images()
    except DatabaseError:
        logger.exception("Error listing images")
        return ResponseBuilder.internal_error("Failed to fetch images", request_id=request_id)

    logger.debug("Images listed", extra={"count": len(images)})

    return ResponseBuilder.ok([image.to_json() for image in images], request_id=request_id)
