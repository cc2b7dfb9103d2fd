"""Composition root: builds the active backing stores once per process.

Handlers never construct repositories themselves. The container is
built from Settings on the first invocation (Lambda cold start) and the
same instances are passed into every service. Tests install their own
container with ``set_container``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from aws_lambda_powertools import Logger

from core.config import Settings
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.infrastructure.local.local_image_storage import LocalImageStorage
from core.infrastructure.memory.memory_repository import InMemoryGalleryRepository
from core.infrastructure.sql.sql_repository import SqlGalleryRepository
from core.repositories.gallery_repository import GalleryRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    BLOB_BACKEND_LOCAL,
    BLOB_BACKEND_S3,
    METADATA_BACKEND_MEMORY,
    METADATA_BACKEND_SQL,
)

logger = Logger(UTC=True)


@dataclass(frozen=True)
class Container:
    settings: Settings
    repository: GalleryRepository
    storage: ImageStorageRepository


def create_repository(settings: Settings) -> GalleryRepository:
    backend = settings.metadata_backend

    if backend == METADATA_BACKEND_MEMORY:
        return InMemoryGalleryRepository()

    if backend == METADATA_BACKEND_SQL:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required for the sql metadata backend")
        repository = SqlGalleryRepository.from_url(settings.database_url)
        repository.create_schema()
        return repository

    raise ValueError(f"unsupported metadata backend: {backend}")


def create_storage(settings: Settings) -> ImageStorageRepository:
    backend = settings.blob_backend

    if backend == BLOB_BACKEND_LOCAL:
        return LocalImageStorage(Path(settings.upload_dir))

    if backend == BLOB_BACKEND_S3:
        if not settings.s3_bucket_name:
            raise ValueError("IMAGE_S3_BUCKET_NAME is required for the s3 blob backend")
        adapter = S3Adapter(
            bucket_name=settings.s3_bucket_name,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
            public_base_url=settings.s3_public_base_url,
        )
        return S3ImageStorage(adapter)

    raise ValueError(f"unsupported blob backend: {backend}")


def build_container(settings: Settings | None = None) -> Container:
    settings = settings or Settings.from_env()
    container = Container(
        settings=settings,
        repository=create_repository(settings),
        storage=create_storage(settings),
    )

    logger.info(
        "Gallery backends configured",
        extra={
            "metadata_backend": settings.metadata_backend,
            "blob_backend": settings.blob_backend,
        },
    )
    return container


_container: Container | None = None


def get_container() -> Container:
    """Return the process container, building it on first use."""
    global _container
    if _container is None:
        _container = build_container()
    return _container


def set_container(container: Container | None) -> None:
    """Install (or with None, reset) the process container."""
    global _container
    _container = container
