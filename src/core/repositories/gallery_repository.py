"""Abstract contract for gallery metadata persistence."""

from abc import ABC, abstractmethod
from typing import Any

from core.models.image import Image, ImageCreate
from core.models.user import User, UserCreate

UserFields = dict[str, Any]


class GalleryRepository(ABC):
    """Contract for storing and retrieving users and image metadata.

    Implementations could be in-memory, PostgreSQL, SQLite, etc.
    Handlers depend on this interface, not the implementation.
    Absence is reported with ``None``/``False``, never with an exception.
    """

    @abstractmethod
    def create_user(self, user: UserCreate) -> User:
        """Persist a new user.

        Raises:
            ConflictError: If the id or email already exists
            DatabaseError: If creation fails for other reasons
        """

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Fetch a user by id, or None if absent.

        Raises:
            DatabaseError: If the lookup fails
        """

    @abstractmethod
    def update_user(self, user_id: str, fields: UserFields) -> User | None:
        """Merge the provided fields into a user and refresh updated_at.

        Args:
            user_id: User identifier
            fields: Snake-case field names to overwrite (email, full_name, avatar_url)

        Returns:
            The updated user, or None if absent

        Raises:
            ConflictError: If the new email belongs to another user
            DatabaseError: If the update fails
        """

    @abstractmethod
    def get_images(self) -> list[Image]:
        """List every image, newest first.

        Raises:
            DatabaseError: If the query fails
        """

    @abstractmethod
    def get_image(self, image_id: str) -> Image | None:
        """Fetch a single image, or None if absent.

        Raises:
            DatabaseError: If the lookup fails
        """

    @abstractmethod
    def create_image(self, image: ImageCreate) -> Image:
        """Persist image metadata.

        Generates the id, stamps uploaded_at with the current time and
        defaults category to "landscape" and user_id to None.

        Raises:
            DatabaseError: If creation fails
        """

    @abstractmethod
    def delete_image(self, image_id: str) -> bool:
        """Remove an image record.

        Returns:
            True if a record was removed, False if the id was absent

        Raises:
            DatabaseError: If deletion fails
        """

    def delete_images(self, image_ids: list[str]) -> dict[str, bool]:
        """Remove several image records, reporting the outcome per id.

        Deletes are independent; there is no rollback when one fails.
        """
        return {image_id: self.delete_image(image_id) for image_id in image_ids}
