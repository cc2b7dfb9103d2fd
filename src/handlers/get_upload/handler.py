"""
Lambda handler serving locally stored image binaries under /uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
from core.models.errors import NotFoundError, StorageError
from core.utils.constants import BLOB_BACKEND_LOCAL, LOCAL_UPLOADS_URL_PREFIX, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import get_path_parameter

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Return the bytes behind an ``/uploads/<key>`` reference (GET /uploads/{key+}).

    Only meaningful with the local blob backend; with object storage the
    image references are public URLs and this route answers 404.

    Args:
        event: API Gateway Lambda proxy event; the key is the ``proxy`` path parameter
        context: AWS Lambda execution context

    Returns:
        Base64-encoded binary proxy response, or 404
    """
    request_id = getattr(context, "aws_request_id", None)
    key = (get_path_parameter(event, "proxy") or "").strip("/")

    logger.debug(
        "Received upload download request",
        extra={"key": key, "request_id": request_id},
    )

    container = get_container()
    if container.settings.blob_backend != BLOB_BACKEND_LOCAL or not key:
        return ResponseBuilder.not_found("Image not found", request_id=request_id)

    try:
        content, content_type, _ = container.storage.download_image(
            reference=f"{LOCAL_UPLOADS_URL_PREFIX}/{key}"
        )
    except NotFoundError:
        return ResponseBuilder.not_found("Image not found", request_id=request_id)
    except StorageError:
        logger.exception("Failed to read stored image", extra={"key": key})
        return ResponseBuilder.internal_error("Failed to read image", request_id=request_id)

    return ResponseBuilder.binary_response(
        content,
        content_type=content_type,
        headers={"Cache-Control": "public, max-age=3600"},
    )
