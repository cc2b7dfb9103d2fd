"""Business logic for user avatar uploads."""

from pathlib import PurePath

from aws_lambda_powertools import Logger

from core.container import Container
from core.models.errors import GalleryServiceError, NotFoundError
from core.models.user import User
from core.repositories.gallery_repository import GalleryRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    AVATAR_KEY_PREFIX,
    ERROR_CODE_USER_NOT_FOUND,
    MAX_AVATAR_SIZE,
    MIME_TYPE_EXTENSION_MAP,
)
from core.utils.identifiers import owner_folder
from core.utils.multipart import UploadedFile
from core.utils.validators import validate_image_file

logger = Logger(UTC=True)


def _user_not_found(user_id: str) -> NotFoundError:
    return NotFoundError(
        message="User not found",
        error_code=ERROR_CODE_USER_NOT_FOUND,
        details={"user_id": user_id},
    )


def avatar_extension(upload: UploadedFile) -> str:
    """Extension for the stored avatar, from the MIME type or the filename."""
    extension = MIME_TYPE_EXTENSION_MAP.get(upload.content_type.lower())
    if extension:
        return extension
    return PurePath(upload.filename).suffix.lstrip(".").lower() or "img"


class AvatarService:
    """Stores one avatar per user and keeps ``avatarUrl`` pointing at it."""

    def __init__(
        self,
        *,
        repository: GalleryRepository,
        storage: ImageStorageRepository,
    ) -> None:
        self.repository = repository
        self.storage = storage

    @classmethod
    def from_container(cls, container: Container) -> "AvatarService":
        return cls(repository=container.repository, storage=container.storage)

    def _get_user(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if user is None:
            raise _user_not_found(user_id)
        return user

    def _owns_avatar(self, user_id: str, reference: str) -> bool:
        """Whether ``reference`` is an avatar stored under this user's folder.

        ``avatarUrl`` can be set freely through the profile endpoints, so
        anything else (provider URLs, gallery images, other users' avatars)
        is left alone.
        """
        if not self.storage.manages(reference):
            return False

        try:
            key = self.storage.key_for_reference(reference)
        except ValueError:
            logger.warning("Ignoring malformed avatar reference", extra={"reference": reference})
            return False

        return key.startswith(f"{AVATAR_KEY_PREFIX}/{owner_folder(user_id)}/")

    def _discard(self, user_id: str, reference: str | None, *, keep: str | None = None) -> None:
        if not reference or reference == keep or not self._owns_avatar(user_id, reference):
            return

        try:
            self.storage.remove_image(reference=reference)
        except GalleryServiceError:
            logger.warning(
                "Failed to remove avatar binary",
                extra={"reference": reference},
            )

    def upload_avatar(self, user_id: str, upload: UploadedFile) -> User:
        """Validate and store an avatar, then record its reference on the user.

        Raises:
            NotFoundError: If the user does not exist
            InvalidFileTypeError: If the file is not an image
            FileTooLargeError: If the file exceeds the avatar size limit
            StorageError: If storing the binary fails
        """
        user = self._get_user(user_id)

        validate_image_file(
            filename=upload.filename,
            content_type=upload.content_type,
            size=upload.size,
            max_size=MAX_AVATAR_SIZE,
        )

        key = f"{AVATAR_KEY_PREFIX}/{owner_folder(user_id)}/avatar.{avatar_extension(upload)}"
        reference = self.storage.upload_image(
            key=key,
            file_data=upload.data,
            mime_type=upload.content_type,
        )

        try:
            updated = self.repository.update_user(user_id, {"avatar_url": reference})
            if updated is None:
                raise _user_not_found(user_id)
        except GalleryServiceError:
            logger.exception("Failed to record avatar", extra={"user_id": user_id, "key": key})
            # An in-place overwrite is still the referenced file and stays
            self._discard(user_id, reference, keep=user.avatar_url)
            raise

        self._discard(user_id, user.avatar_url, keep=reference)

        logger.info("Avatar updated", extra={"user_id": user_id, "key": key})
        return updated

    def remove_avatar(self, user_id: str) -> User:
        """Clear the user's avatar, removing the stored binary when it is ours."""
        user = self._get_user(user_id)

        updated = self.repository.update_user(user_id, {"avatar_url": None})
        if updated is None:
            raise _user_not_found(user_id)

        self._discard(user_id, user.avatar_url)

        logger.info("Avatar removed", extra={"user_id": user_id})
        return updated
