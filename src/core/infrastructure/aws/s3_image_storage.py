"""S3-backed implementation of ImageStorageRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from core.models.errors import NotFoundError, StorageError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
)

logger = Logger(UTC=True)


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3.

    References handed back to callers are public object URLs, so the
    gallery client can load images without going through the API.
    """

    def __init__(self, adapter: S3AdapterProtocol) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter

    def key_for_reference(self, reference: str) -> str:
        return self._s3.key_from_url(url=reference) or reference.lstrip("/")

    def manages(self, reference: str) -> bool:
        return self._s3.key_from_url(url=reference) is not None

    def upload_image(
        self,
        *,
        key: str,
        file_data: bytes,
        mime_type: str,
    ) -> str:
        """Upload image bytes to S3 and return the object's public URL."""
        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(file_data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=mime_type,
                metadata={"size": str(len(file_data))},
            )
            logger.info("Image uploaded successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        return self._s3.public_url(key=key)

    def download_image(self, *, reference: str) -> tuple[bytes, str, int]:
        """Download image bytes directly from S3."""
        key = self.key_for_reference(reference)
        logger.debug("Downloading image", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body = response["Body"].read()
            content_type = response.get("ContentType", "application/octet-stream")
            content_length = response.get("ContentLength", len(body))

            logger.info(
                "Image downloaded successfully",
                extra={"key": key, "size": content_length},
            )

            return body, content_type, content_length

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise NotFoundError(
                    message="Image not found",
                    details={"key": key},
                ) from exc

            logger.error("S3 download failed", extra={"key": key})
            raise StorageError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise StorageError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key},
            ) from exc

    def remove_image(self, *, reference: str) -> None:
        """Delete an image object from S3."""
        key = self.key_for_reference(reference)
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc
