"""Business logic for gallery image uploads.

This module coordinates validation, binary storage, categorization and
metadata persistence for a batch of uploaded files while translating
failures into domain-specific errors.
"""

from dataclasses import dataclass, field

from aws_lambda_powertools import Logger

from core.container import Container
from core.models.errors import (
    GalleryServiceError,
    MetadataOperationFailedError,
    ValidationError,
)
from core.models.image import Image, ImageCreate, RejectedFile
from core.repositories.gallery_repository import GalleryRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.categories import categorize
from core.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_NO_FILES,
    ERROR_CODE_TOO_MANY_FILES,
    IMAGE_KEY_PREFIX,
    MAX_FILE_SIZE,
    MAX_FILES_PER_UPLOAD,
)
from core.utils.identifiers import generate_filename, owner_folder
from core.utils.multipart import UploadedFile
from core.utils.validators import validate_image_file

logger = Logger(UTC=True)


@dataclass
class UploadResult:
    images: list[Image] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - Per-file validation (MIME type and size) before any persistence
    - Uploading accepted files to the binary store
    - Deriving the category tag from the original filename
    - Persisting image metadata through the gallery repository
    """

    def __init__(
        self,
        *,
        repository: GalleryRepository,
        storage: ImageStorageRepository,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self.repository = repository
        self.storage = storage
        self.max_file_size = max_file_size

    @classmethod
    def from_container(cls, container: Container) -> "UploadService":
        return cls(repository=container.repository, storage=container.storage)

    def partition(self, files: list[UploadedFile]) -> tuple[list[UploadedFile], list[RejectedFile]]:
        """Split files into accepted ones and rejection reports, keeping order."""
        accepted: list[UploadedFile] = []
        rejected: list[RejectedFile] = []

        for upload in files:
            try:
                validate_image_file(
                    filename=upload.filename,
                    content_type=upload.content_type,
                    size=upload.size,
                    max_size=self.max_file_size,
                )
            except ValidationError as exc:
                logger.warning(
                    "Rejected uploaded file",
                    extra={"original_name": upload.filename, "error_code": exc.error_code},
                )
                rejected.append(
                    RejectedFile(
                        original_name=upload.filename,
                        error=exc.error_code,
                        message=exc.message,
                    )
                )
                continue

            accepted.append(upload)

        return accepted, rejected

    def upload_images(
        self,
        files: list[UploadedFile],
        *,
        user_id: str | None = None,
    ) -> UploadResult:
        """Validate and store a batch of uploaded files.

        The upload flow is:
        1. Validate every file; invalid files are rejected individually
        2. For each accepted file, in order: store bytes, categorize, record metadata

        A storage or metadata failure aborts the remaining files and
        propagates; images already stored for earlier files are kept.

        Args:
            files: File parts from the multipart request
            user_id: Optional owner taken from the x-user-id header

        Returns:
            Created images in input order and the rejected files

        Raises:
            ValidationError: No files, too many files, or every file rejected
            StorageError: If storing a binary fails
            MetadataOperationFailedError: If metadata persistence fails
        """
        if not files:
            raise ValidationError(message="No files uploaded", error_code=ERROR_CODE_NO_FILES)

        if len(files) > MAX_FILES_PER_UPLOAD:
            raise ValidationError(
                message=f"Too many files: at most {MAX_FILES_PER_UPLOAD} images per upload",
                error_code=ERROR_CODE_TOO_MANY_FILES,
                details={"count": len(files)},
            )

        accepted, rejected = self.partition(files)

        if not accepted:
            if len(rejected) == 1:
                only = rejected[0]
                raise ValidationError(
                    message=only.message,
                    error_code=only.error,
                    details={"rejected": [only.to_json()]},
                )
            raise ValidationError(
                message="None of the uploaded files are valid images",
                details={"rejected": [item.to_json() for item in rejected]},
            )

        owner = user_id or None
        result = UploadResult(rejected=rejected)

        for upload in accepted:
            result.images.append(self._store(upload, user_id=owner))

        logger.info(
            "Images uploaded",
            extra={
                "user_id": owner,
                "uploaded": len(result.images),
                "rejected": len(result.rejected),
            },
        )
        return result

    def _store(self, upload: UploadedFile, *, user_id: str | None) -> Image:
        filename = generate_filename(upload.filename)
        key = f"{IMAGE_KEY_PREFIX}/{owner_folder(user_id)}/{filename}"

        reference = self.storage.upload_image(
            key=key,
            file_data=upload.data,
            mime_type=upload.content_type,
        )

        try:
            return self.repository.create_image(
                ImageCreate(
                    filename=reference,
                    original_name=upload.filename,
                    mime_type=upload.content_type,
                    size=upload.size,
                    category=categorize(upload.filename),
                    user_id=user_id,
                )
            )
        except (GalleryServiceError, ValueError) as exc:
            logger.exception("Failed to persist image metadata", extra={"key": key})

            # Best-effort cleanup to avoid orphaned storage objects
            try:
                self.storage.remove_image(reference=reference)
            except GalleryServiceError:
                logger.warning(
                    "Failed to clean up uploaded image after metadata failure",
                    extra={"reference": reference},
                )

            raise MetadataOperationFailedError(
                message="Unable to save image metadata",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"original_name": upload.filename},
            ) from exc
