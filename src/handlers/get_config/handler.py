"""
Lambda handler exposing public client configuration.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.container import get_container
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
    Return the identity-provider settings the client signs in with
    (GET /api/config). Unset values are returned as null.
    """
    logger.debug(
        "Received config request",
        extra={"request_id": getattr(context, "aws_request_id", None)},
    )

    settings = get_container().settings

    return ResponseBuilder.ok(
        {
            "supabaseUrl": settings.supabase_url,
            "supabaseAnonKey": settings.supabase_anon_key,
        }
    )
