"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Implementations could be S3, GCS, local disk, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload_image(
        self,
        *,
        key: str,
        file_data: bytes,
        mime_type: str,
    ) -> str:
        """Upload image and return its storage reference.

        Args:
            key: Relative object key (e.g. "images/user_1/1700000000000-42.png")
            file_data: Binary image content
            mime_type: MIME type (e.g., 'image/jpeg')

        Returns:
            Storage reference recorded as Image.filename (path or public URL)

        Raises:
            StorageError: If upload fails
        """

    @abstractmethod
    def manages(self, reference: str) -> bool:
        """Whether a reference points into this store.

        Avatar URLs may come from the identity provider and image
        references may predate a backend switch; those are never removed.
        """

    @abstractmethod
    def key_for_reference(self, reference: str) -> str:
        """Map a storage reference back to its relative object key.

        Raises:
            ValueError: If the reference does not resolve to a valid key
        """

    @abstractmethod
    def download_image(self, *, reference: str) -> tuple[bytes, str, int]:
        """Download image by storage reference or key.

        Returns:
            Tuple of (content_bytes, content_type, content_length)

        Raises:
            NotFoundError: If image doesn't exist
            StorageError: If download fails
        """

    @abstractmethod
    def remove_image(self, *, reference: str) -> None:
        """Delete image by storage reference.

        Raises:
            StorageError: If deletion fails
        """
