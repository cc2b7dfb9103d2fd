import json
from unittest.mock import patch

from core.models.errors import DatabaseError, StorageError
from core.models.image import ImageCreate
from handlers.delete_image.handler import batch_handler, handler


def delete_event(image_id: str | None) -> dict:
    return {
        "httpMethod": "DELETE",
        "pathParameters": {"id": image_id} if image_id is not None else None,
    }


def stored_image(container, name: str = "a.png", data: bytes = b"data"):
    reference = container.storage.upload_image(
        key=f"images/anonymous/{name}",
        file_data=data,
        mime_type="image/png",
    )
    return container.repository.create_image(
        ImageCreate(filename=reference, original_name=name, mime_type="image/png", size=len(data))
    )


class TestDeleteImageHandler:
    def test_delete_removes_record_and_binary(self, container, lambda_context) -> None:
        image = stored_image(container)
        path = container.storage.root / "images" / "anonymous" / "a.png"
        assert path.is_file()

        response = handler(delete_event(image.id), lambda_context)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["message"] == "Image deleted successfully"
        assert container.repository.get_image(image.id) is None
        assert container.repository.get_images() == []
        assert not path.exists()

    def test_second_delete_is_not_found(self, container, lambda_context) -> None:
        image = stored_image(container)

        assert handler(delete_event(image.id), lambda_context)["statusCode"] == 200
        response = handler(delete_event(image.id), lambda_context)

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["message"] == "Image not found"

    def test_unknown_id(self, container, lambda_context) -> None:
        response = handler(delete_event("img_missing"), lambda_context)

        assert response["statusCode"] == 404

    def test_missing_id(self, container, lambda_context) -> None:
        for event in (delete_event(None), delete_event("   ")):
            response = handler(event, lambda_context)

            assert response["statusCode"] == 400
            body = json.loads(response["body"])
            assert body["message"] == "Invalid request payload"
            assert body["details"]["errors"][0]["field"] == "image_id"

    def test_storage_failure_still_deletes_record(self, container, lambda_context) -> None:
        image = stored_image(container)

        with patch.object(
            container.storage,
            "remove_image",
            side_effect=StorageError(message="Unable to delete image at this time"),
        ):
            response = handler(delete_event(image.id), lambda_context)

        assert response["statusCode"] == 200
        assert container.repository.get_image(image.id) is None

    def test_foreign_reference_is_left_alone(self, container, lambda_context) -> None:
        image = container.repository.create_image(
            ImageCreate(
                filename="https://cdn.example.com/images/a.png",
                original_name="a.png",
                mime_type="image/png",
                size=4,
            )
        )

        with patch.object(container.storage, "remove_image") as remove:
            response = handler(delete_event(image.id), lambda_context)

        assert response["statusCode"] == 200
        remove.assert_not_called()

    def test_record_vanishing_mid_delete(self, container, lambda_context) -> None:
        image = stored_image(container)

        with patch.object(container.repository, "delete_image", return_value=False):
            response = handler(delete_event(image.id), lambda_context)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["message"] == "Failed to delete image"

    def test_database_failure(self, container, lambda_context) -> None:
        with patch.object(
            container.repository,
            "get_image",
            side_effect=DatabaseError(message="database is down"),
        ):
            response = handler(delete_event("img_1"), lambda_context)

        assert response["statusCode"] == 500


class TestBatchDeleteHandler:
    def test_batch_delete_reports_each_id(self, container, lambda_context, json_event) -> None:
        first = stored_image(container, "a.png")
        second = stored_image(container, "b.png")

        response = batch_handler(
            json_event({"imageIds": [first.id, "img_missing", second.id, first.id]}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["results"] == [
            {"id": first.id, "deleted": True},
            {"id": "img_missing", "deleted": False},
            {"id": second.id, "deleted": True},
        ]
        assert body["deletedCount"] == 2
        assert container.repository.get_images() == []
        assert not any(path.is_file() for path in container.storage.root.rglob("*"))

    def test_snake_case_body_is_accepted(self, container, lambda_context, json_event) -> None:
        image = stored_image(container)

        response = batch_handler(json_event({"image_ids": [image.id]}), lambda_context)

        assert json.loads(response["body"])["deletedCount"] == 1

    def test_empty_id_list(self, container, lambda_context, json_event) -> None:
        response = batch_handler(json_event({"imageIds": []}), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid request payload"

    def test_invalid_json(self, container, lambda_context, json_event) -> None:
        event = json_event()
        event["body"] = "{not json"

        response = batch_handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid JSON body"

    def test_database_failure_stops_before_later_images(
        self, container, lambda_context, json_event
    ) -> None:
        first = stored_image(container, "a.png")
        second = stored_image(container, "b.png")

        with patch.object(
            container.repository,
            "delete_image",
            side_effect=DatabaseError(message="database is down"),
        ):
            response = batch_handler(
                json_event({"imageIds": [first.id, second.id]}),
                lambda_context,
            )

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["message"] == "Failed to delete images"
        assert container.repository.get_image(second.id) is not None
        assert (container.storage.root / "images" / "anonymous" / "b.png").is_file()
