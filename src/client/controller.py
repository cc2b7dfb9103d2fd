"""
Gallery controller: connects user actions, the API client and local state.

Every action reports its outcome as a toast-style Notification and
refetches the image list after a mutation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from aws_lambda_powertools import Logger

from core.models.image import Image
from core.models.user import User
from core.utils.constants import (
    IMAGE_MIME_PREFIX,
    MAX_AVATAR_SIZE,
    MAX_FILE_SIZE,
    get_max_file_size_mb,
)

from .api_client import ApiError, FileSource, GalleryApiClient, LocalFile, as_local_file
from .gallery_state import GalleryState

logger = Logger(service="gallery-client", UTC=True)

VARIANT_DEFAULT = "default"
VARIANT_DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = VARIANT_DEFAULT


class GalleryController:
    """Drives the gallery screen on behalf of one signed-in user."""

    def __init__(
        self,
        client: GalleryApiClient,
        state: GalleryState | None = None,
        *,
        user_id: str | None = None,
    ) -> None:
        self.client = client
        self.state = state or GalleryState()
        self.user_id = user_id
        self.notifications: list[Notification] = []

    def _notify(self, title: str, description: str, variant: str = VARIANT_DEFAULT) -> None:
        self.notifications.append(Notification(title, description, variant))

    def refresh(self) -> list[Image]:
        """Refetch the image list into the local state."""
        self.state.set_images(self.client.list_images())
        return self.state.images

    # Uploads

    def validate_files(self, files: Iterable[FileSource]) -> list[LocalFile]:
        """Keep image files within the size limit, reporting every other file."""
        valid: list[LocalFile] = []

        for item in map(as_local_file, files):
            if not item.content_type.lower().startswith(IMAGE_MIME_PREFIX):
                self._notify(
                    "Invalid file type",
                    f"{item.name} is not an image file.",
                    VARIANT_DESTRUCTIVE,
                )
                continue

            if item.size > MAX_FILE_SIZE:
                self._notify(
                    "File too large",
                    f"{item.name} is larger than {get_max_file_size_mb()}MB.",
                    VARIANT_DESTRUCTIVE,
                )
                continue

            valid.append(item)

        return valid

    def upload(self, files: Iterable[FileSource]) -> list[Image]:
        valid = self.validate_files(files)
        if not valid:
            return []

        try:
            result = self.client.upload_images(valid, user_id=self.user_id)
        except ApiError as exc:
            logger.warning("Upload failed", extra={"status": exc.status, "error": exc.message})
            self._notify(
                "Upload failed",
                "Failed to upload images. Please try again.",
                VARIANT_DESTRUCTIVE,
            )
            return []

        self._notify("Upload successful", "Your images have been uploaded successfully.")
        self.refresh()
        return result.images

    # Deletes

    def delete_image(self, image_id: str) -> bool:
        try:
            self.client.delete_image(image_id)
        except ApiError as exc:
            logger.warning(
                "Delete failed",
                extra={"image_id": image_id, "status": exc.status, "error": exc.message},
            )
            self._notify(
                "Delete failed",
                "Failed to delete the image. Please try again.",
                VARIANT_DESTRUCTIVE,
            )
            return False

        self._notify("Image deleted", "The image has been successfully deleted.")
        self.state.close_preview()
        self.refresh()
        return True

    def delete_selected(self) -> int:
        """Delete the current selection through the batch endpoint.

        Reports a single success toast when every id was removed and a
        single failure toast otherwise. Returns the number removed.
        """
        selected = sorted(self.state.selected_ids)
        if not selected:
            return 0

        try:
            results = self.client.delete_images(selected)
        except ApiError as exc:
            logger.warning(
                "Bulk delete failed",
                extra={"count": len(selected), "status": exc.status, "error": exc.message},
            )
            results = {}

        deleted = sum(results.get(image_id, False) for image_id in selected)

        if deleted == len(selected):
            self._notify("Images deleted", f"Successfully deleted {deleted} images.")
        else:
            self._notify(
                "Delete failed",
                "Failed to delete some images. Please try again.",
                VARIANT_DESTRUCTIVE,
            )

        self.state.deselect_all()
        self.state.selection_mode = False
        self.refresh()
        return deleted

    # Profile

    def update_profile(self, user_id: str, **fields: str | None) -> User | None:
        try:
            user = self.client.update_user(user_id, **fields)
        except ApiError as exc:
            self._notify("Update failed", exc.message or "Failed to update profile.", VARIANT_DESTRUCTIVE)
            return None

        self._notify("Profile updated", "Your profile information has been updated successfully.")
        return user

    def upload_avatar(self, user_id: str, file: FileSource) -> User | None:
        item = as_local_file(file)

        if not item.content_type.lower().startswith(IMAGE_MIME_PREFIX):
            self._notify("Invalid file type", "Please upload an image file.", VARIANT_DESTRUCTIVE)
            return None

        if item.size > MAX_AVATAR_SIZE:
            self._notify(
                "File too large",
                f"Please upload an image smaller than {get_max_file_size_mb(MAX_AVATAR_SIZE)}MB.",
                VARIANT_DESTRUCTIVE,
            )
            return None

        try:
            user = self.client.upload_avatar(user_id, item)
        except ApiError as exc:
            self._notify(
                "Upload failed",
                exc.message or "Failed to upload profile image.",
                VARIANT_DESTRUCTIVE,
            )
            return None

        self._notify("Profile image updated", "Your profile image has been updated successfully.")
        return user

    def remove_avatar(self, user_id: str) -> User | None:
        try:
            user = self.client.remove_avatar(user_id)
        except ApiError as exc:
            self._notify(
                "Failed to remove image",
                exc.message or "Failed to remove profile image.",
                VARIANT_DESTRUCTIVE,
            )
            return None

        self._notify("Profile image removed", "Your profile image has been removed.")
        return user
