import base64
import json
from unittest.mock import patch

from core.models.errors import DatabaseError
from core.models.image import ImageCreate
from handlers.get_config.handler import handler as config_handler
from handlers.get_upload.handler import handler as upload_file_handler
from handlers.list_images.handler import handler as list_handler


class TestGetConfigHandler:
    def test_returns_identity_provider_settings(self, container, lambda_context) -> None:
        response = config_handler({"httpMethod": "GET"}, lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["supabaseUrl"] == "https://project.supabase.co"
        assert body["supabaseAnonKey"] == "anon-key"


class TestListImagesHandler:
    def test_empty_gallery(self, container, lambda_context) -> None:
        response = list_handler({"httpMethod": "GET"}, lambda_context)

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == []
        assert response["headers"]["X-Request-Id"] == "test-request-id"

    def test_newest_first(self, container, lambda_context, make_image) -> None:
        for index, minutes_ago in enumerate((30, 5, 15)):
            moment = make_image(minutes_ago=minutes_ago).uploaded_at
            with patch("core.infrastructure.memory.memory_repository.utc_now", return_value=moment):
                container.repository.create_image(
                    ImageCreate(
                        filename=f"/uploads/images/anonymous/{index}.png",
                        original_name=f"{index}.png",
                        mime_type="image/png",
                        size=10,
                    )
                )

        body = json.loads(list_handler({"httpMethod": "GET"}, lambda_context)["body"])

        assert [image["originalName"] for image in body] == ["1.png", "2.png", "0.png"]
        assert set(body[0]) == {
            "id",
            "filename",
            "originalName",
            "mimeType",
            "size",
            "category",
            "uploadedAt",
            "userId",
        }

    def test_database_failure(self, container, lambda_context) -> None:
        with patch.object(
            container.repository,
            "get_images",
            side_effect=DatabaseError(message="database is down"),
        ):
            response = list_handler({"httpMethod": "GET"}, lambda_context)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["message"] == "Failed to fetch images"


class TestGetUploadHandler:
    def test_serves_stored_bytes(self, container, lambda_context, sample_image_binary) -> None:
        container.storage.upload_image(
            key="images/john/1-2.png",
            file_data=sample_image_binary,
            mime_type="image/png",
        )

        response = upload_file_handler(
            {"httpMethod": "GET", "pathParameters": {"proxy": "images/john/1-2.png"}},
            lambda_context,
        )

        assert response["statusCode"] == 200
        assert response["isBase64Encoded"] is True
        assert base64.b64decode(response["body"]) == sample_image_binary
        assert response["headers"]["Content-Type"] == "image/png"
        assert response["headers"]["Content-Length"] == str(len(sample_image_binary))

    def test_missing_file(self, container, lambda_context) -> None:
        response = upload_file_handler(
            {"httpMethod": "GET", "pathParameters": {"proxy": "images/john/none.png"}},
            lambda_context,
        )

        assert response["statusCode"] == 404

    def test_empty_key(self, container, lambda_context) -> None:
        response = upload_file_handler({"httpMethod": "GET", "pathParameters": None}, lambda_context)

        assert response["statusCode"] == 404

    def test_path_traversal_is_refused(self, container, lambda_context, tmp_path) -> None:
        (tmp_path / "secret.txt").write_text("secret")

        response = upload_file_handler(
            {"httpMethod": "GET", "pathParameters": {"proxy": "../secret.txt"}},
            lambda_context,
        )

        assert response["statusCode"] == 400

    def test_not_served_with_object_storage(self, s3_container, lambda_context) -> None:
        response = upload_file_handler(
            {"httpMethod": "GET", "pathParameters": {"proxy": "images/a.png"}},
            lambda_context,
        )

        assert response["statusCode"] == 404
