"""Local filesystem implementation of ImageStorageRepository."""

from __future__ import annotations

import mimetypes
from pathlib import Path, PurePosixPath

from aws_lambda_powertools import Logger

from core.models.errors import NotFoundError, StorageError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    LOCAL_UPLOADS_URL_PREFIX,
)

logger = Logger(UTC=True)


class LocalImageStorage(ImageStorageRepository):
    """Stores binaries under a root directory, served back under ``/uploads``."""

    def __init__(self, root: Path, url_prefix: str = LOCAL_UPLOADS_URL_PREFIX) -> None:
        self._root = root.resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._url_prefix = "/" + url_prefix.strip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _normalize_key(self, key: str) -> str:
        normalized = key.strip().lstrip("/")
        path_key = PurePosixPath(normalized)
        if not normalized or path_key.is_absolute() or ".." in path_key.parts:
            raise ValueError(f"invalid storage key: {key!r}")
        return str(path_key)

    def key_for_reference(self, reference: str) -> str:
        """Map ``/uploads/<key>`` (or a bare key) back to the storage key."""
        prefix = self._url_prefix + "/"
        if reference.startswith(prefix):
            reference = reference[len(prefix):]
        return self._normalize_key(reference)

    def manages(self, reference: str) -> bool:
        return reference.startswith(self._url_prefix + "/")

    def _path_for_key(self, key: str) -> Path:
        normalized = self._normalize_key(key)
        return self._root.joinpath(*PurePosixPath(normalized).parts)

    def resolve_reference(self, key: str) -> str:
        return f"{self._url_prefix}/{self._normalize_key(key)}"

    def upload_image(
        self,
        *,
        key: str,
        file_data: bytes,
        mime_type: str,
    ) -> str:
        path = self._path_for_key(key)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(file_data)
        except OSError as exc:
            logger.exception("Local image write failed", extra={"key": key})
            raise StorageError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        logger.info(
            "Image stored locally",
            extra={"key": key, "size": len(file_data), "mime_type": mime_type},
        )
        return self.resolve_reference(key)

    def download_image(self, *, reference: str) -> tuple[bytes, str, int]:
        key = self.key_for_reference(reference)
        path = self._path_for_key(key)

        if not path.is_file():
            raise NotFoundError(message="Image not found", details={"key": key})

        try:
            body = path.read_bytes()
        except OSError as exc:
            logger.exception("Local image read failed", extra={"key": key})
            raise StorageError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key},
            ) from exc

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return body, content_type, len(body)

    def remove_image(self, *, reference: str) -> None:
        key = self.key_for_reference(reference)
        path = self._path_for_key(key)

        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Local image removal failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image removed locally", extra={"key": key})
