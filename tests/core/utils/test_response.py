import base64
import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> Any:
    body = resp.get("body")
    if not body:
        return {}

    return cast(Any, json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="https://app.example")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["X-Request-Id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://app.example"


def test_ok_response_with_list_body_keeps_array() -> None:
    resp = ResponseBuilder.ok([{"id": "img_1"}], request_id="req-2")

    assert parse_body(resp) == [{"id": "img_1"}]
    assert resp["headers"]["X-Request-Id"] == "req-2"


def test_ok_without_request_id_leaves_body_untouched() -> None:
    resp = ResponseBuilder.ok({"message": "Image deleted successfully"})

    assert parse_body(resp) == {"message": "Image deleted successfully"}
    assert "X-Request-Id" not in resp["headers"]


def test_no_content_response() -> None:
    resp = ResponseBuilder.no_content(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.not_found, HTTPStatus.NOT_FOUND, "NOT_FOUND"),
        (ResponseBuilder.conflict, HTTPStatus.CONFLICT, "CONFLICT"),
        (
            ResponseBuilder.internal_error,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
        ),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("bad", request_id="req-x")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == error_name
    assert parsed["message"] == "bad"
    assert parsed["request_id"] == "req-x"
    assert "timestamp" in parsed


def test_bad_request_with_error_code_and_details() -> None:
    resp = ResponseBuilder.bad_request(
        "notes.txt is not an image file",
        error="INVALID_FILE_TYPE",
        details={"filename": "notes.txt"},
    )
    parsed = parse_body(resp)

    assert parsed["error"] == "INVALID_FILE_TYPE"
    assert parsed["details"] == {"filename": "notes.txt"}


def test_validation_error_response() -> None:
    resp = ResponseBuilder.validation_error(
        message="Invalid request payload",
        details=[{"field": "imageIds", "message": "This field is required"}],
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parsed["error"] == "VALIDATION_FAILED"
    assert parsed["details"][0]["field"] == "imageIds"


def test_default_error_messages() -> None:
    assert parse_body(ResponseBuilder.not_found())["message"] == "Resource not found"
    assert parse_body(ResponseBuilder.conflict())["message"] == "Resource already exists"
    assert parse_body(ResponseBuilder.internal_error())["message"] == "Internal server error"


def test_binary_response() -> None:
    content = b"binary-data"

    resp = ResponseBuilder.binary_response(
        content,
        content_type="image/png",
        headers={"Cache-Control": "no-cache"},
    )

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["isBase64Encoded"] is True
    assert base64.b64decode(resp["body"]) == content
    assert resp["headers"]["Content-Type"] == "image/png"
    assert resp["headers"]["Content-Length"] == str(len(content))
    assert resp["headers"]["Cache-Control"] == "no-cache"
