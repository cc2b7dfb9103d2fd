"""Business logic for image deletion.

This module coordinates deletion of an image record and its stored
binary, singly or in bulk, while translating failures into
domain-specific errors.
"""

from aws_lambda_powertools import Logger

from core.container import Container
from core.models.errors import (
    GalleryServiceError,
    MetadataOperationFailedError,
    NotFoundError,
)
from core.models.image import Image
from core.repositories.gallery_repository import GalleryRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_IMAGE_NOT_FOUND, ERROR_CODE_METADATA_DELETE_FAILED

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Validation that the image exists
    - Best-effort removal of the stored binary
    - Removal of the metadata record

    It does not perform low-level infrastructure operations directly.
    """

    def __init__(
        self,
        *,
        repository: GalleryRepository,
        storage: ImageStorageRepository,
    ) -> None:
        self.repository = repository
        self.storage = storage

    @classmethod
    def from_container(cls, container: Container) -> "DeleteService":
        return cls(repository=container.repository, storage=container.storage)

    def _remove_binary(self, image: Image) -> None:
        if not self.storage.manages(image.filename):
            logger.debug(
                "Image binary is not held by the active store",
                extra={"image_id": image.id, "reference": image.filename},
            )
            return

        try:
            self.storage.remove_image(reference=image.filename)
        except GalleryServiceError:
            # The record is still removed; an orphaned object is tolerated
            logger.warning(
                "Failed to delete image binary",
                extra={"image_id": image.id, "reference": image.filename},
            )

    def delete_image(self, image_id: str) -> None:
        """Delete an image and its stored binary.

        The deletion flow is:
        1. Fetch metadata to confirm the image exists and locate the binary
        2. Remove the binary from storage (failures are only logged)
        3. Delete the metadata record

        Args:
            image_id: Unique identifier of the image to delete

        Raises:
            NotFoundError: If the image does not exist
            MetadataOperationFailedError: If the record vanished before removal
            DatabaseError: If the backing store fails
        """
        logger.debug("Starting image deletion", extra={"image_id": image_id})

        image = self.repository.get_image(image_id)
        if image is None:
            logger.warning("Image not found", extra={"image_id": image_id})
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"image_id": image_id},
            )

        self._remove_binary(image)

        if not self.repository.delete_image(image_id):
            raise MetadataOperationFailedError(
                message="Failed to delete image",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            )

        logger.info("Image deleted successfully", extra={"image_id": image_id})

    def delete_images(self, image_ids: list[str]) -> dict[str, bool]:
        """Delete several images, reporting per id whether a record was removed.

        Each id is an independent delete: binary first, then its record.
        Unknown ids are reported as ``False``; they do not fail the batch.
        Duplicate ids are processed once. A backing store failure stops
        the batch; ids already processed stay deleted.
        """
        unique_ids = list(dict.fromkeys(image_ids))
        results = {image_id: False for image_id in unique_ids}

        for image_id in unique_ids:
            image = self.repository.get_image(image_id)
            if image is None:
                continue
            self._remove_binary(image)
            results[image_id] = self.repository.delete_image(image_id)

        logger.info(
            "Batch delete completed",
            extra={
                "requested": len(unique_ids),
                "deleted": sum(results.values()),
            },
        )
        return results
