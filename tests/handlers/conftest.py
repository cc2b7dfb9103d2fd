import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest
from requests_toolbelt.multipart.encoder import MultipartEncoder

FilePart = tuple[str, bytes, str]


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway event carrying a base64 multipart body.

    Usage:
        event = multipart_event([("a.png", png_bytes, "image/png")], user_id="john")
    """

    def _build(
        files: list[FilePart],
        *,
        field_name: str = "images",
        user_id: str | None = None,
        path_parameters: dict[str, str] | None = None,
        extra_fields: list[tuple[str, str]] | None = None,
    ) -> dict[str, Any]:
        fields: list[tuple[str, Any]] = [
            (field_name, (name, data, content_type)) for name, data, content_type in files
        ]
        fields.extend(extra_fields or [])

        encoder = MultipartEncoder(fields=fields)
        headers = {"Content-Type": encoder.content_type}
        if user_id is not None:
            headers["x-user-id"] = user_id

        return {
            "httpMethod": "POST",
            "headers": headers,
            "pathParameters": path_parameters,
            "body": base64.b64encode(encoder.to_string()).decode("utf-8"),
            "isBase64Encoded": True,
        }

    return _build


@pytest.fixture
def json_event() -> Callable[..., dict[str, Any]]:
    def _build(
        body: Any = None,
        *,
        method: str = "POST",
        path_parameters: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "headers": {"Content-Type": "application/json"},
            "pathParameters": path_parameters,
            "body": json.dumps(body) if body is not None else None,
            "isBase64Encoded": False,
        }

    return _build