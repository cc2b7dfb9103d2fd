"""
Pytest configuration and fixtures for gallery service tests.
Provides AWS mocking, S3 fixtures, repositories and container injection.
"""

import base64
import os
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-gallery")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageGallery")
os.environ.setdefault("TEST_S3_BUCKET_NAME", "test-gallery-bucket")

from core.config import Settings  # noqa: E402
from core.container import Container, set_container  # noqa: E402
from core.infrastructure.adapters.s3_adapter import S3Adapter  # noqa: E402
from core.infrastructure.aws.s3_image_storage import S3ImageStorage  # noqa: E402
from core.infrastructure.local.local_image_storage import LocalImageStorage  # noqa: E402
from core.infrastructure.memory.memory_repository import InMemoryGalleryRepository  # noqa: E402
from core.infrastructure.sql.sql_repository import SqlGalleryRepository  # noqa: E402
from core.models.image import Image  # noqa: E402
from core.utils.constants import (  # noqa: E402
    BLOB_BACKEND_LOCAL,
    BLOB_BACKEND_S3,
    METADATA_BACKEND_MEMORY,
)

BUCKET_NAME = os.environ["TEST_S3_BUCKET_NAME"]


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=BUCKET_NAME)
    except ClientError:
        s3_client.create_bucket(Bucket=BUCKET_NAME)

    yield s3_client

    _cleanup_s3_objects(s3_client, BUCKET_NAME)


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("images/user/img.jpg")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_client.get_object(Bucket=BUCKET_NAME, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_object_exists(s3_client) -> Callable[[str], bool]:
    def _exists(key: str) -> bool:
        try:
            s3_client.head_object(Bucket=BUCKET_NAME, Key=key)
        except ClientError:
            return False
        return True

    return _exists


@pytest.fixture
def s3_adapter(s3_bucket) -> S3Adapter:
    return S3Adapter(bucket_name=BUCKET_NAME, region=os.environ["AWS_REGION"])


@pytest.fixture
def s3_storage(s3_adapter) -> S3ImageStorage:
    return S3ImageStorage(s3_adapter)


@pytest.fixture
def memory_repository() -> InMemoryGalleryRepository:
    return InMemoryGalleryRepository()


@pytest.fixture
def sql_repository() -> Iterator[SqlGalleryRepository]:
    """SQLite in-memory database shared by every session of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    repository = SqlGalleryRepository(engine)
    repository.create_schema()

    yield repository

    engine.dispose()


@pytest.fixture
def local_storage(tmp_path: Path) -> LocalImageStorage:
    return LocalImageStorage(tmp_path / "uploads")


@pytest.fixture
def container(tmp_path: Path, memory_repository, local_storage) -> Iterator[Container]:
    """Install an in-memory repository and local disk storage for handlers."""
    installed = Container(
        settings=Settings(
            metadata_backend=METADATA_BACKEND_MEMORY,
            blob_backend=BLOB_BACKEND_LOCAL,
            upload_dir=str(tmp_path / "uploads"),
            supabase_url="https://project.supabase.co",
            supabase_anon_key="anon-key",
        ),
        repository=memory_repository,
        storage=local_storage,
    )
    set_container(installed)

    yield installed

    set_container(None)


@pytest.fixture
def s3_container(memory_repository, s3_storage) -> Iterator[Container]:
    """Install an in-memory repository and moto-backed S3 storage for handlers."""
    installed = Container(
        settings=Settings(
            metadata_backend=METADATA_BACKEND_MEMORY,
            blob_backend=BLOB_BACKEND_S3,
            s3_bucket_name=BUCKET_NAME,
        ),
        repository=memory_repository,
        storage=s3_storage,
    )
    set_container(installed)

    yield installed

    set_container(None)


@pytest.fixture
def make_image() -> Callable[..., Image]:
    """
    Factory for Image models with sensible defaults.

    Usage:
        image = make_image(id="img_1", original_name="sunset.jpg", minutes_ago=5)
    """
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _make(
        *,
        id: str = "img_1",
        original_name: str = "photo.jpg",
        category: str = "landscape",
        minutes_ago: int = 0,
        user_id: str | None = None,
        size: int = 1024,
    ) -> Image:
        return Image(
            id=id,
            filename=f"/uploads/images/anonymous/{id}.jpg",
            original_name=original_name,
            mime_type="image/jpeg",
            size=size,
            category=category,
            uploaded_at=base_time - timedelta(minutes=minutes_ago),
            user_id=user_id,
        )

    return _make


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\x14\r\x0c\x0b\x0b\x0c\x19\x12\x13\x0f\x14\x1d\x1a\x1f\x1e\x1d\x1a\x1c"
        b"\x1c $.' \",#\x1c\x1c(7),01444\x1f'9=82<.342\xff\xc0\x00\x0b\x08"
        b"\x00\x01\x00\x01\x01\x01\x11\x00\xff\xc4\x00\x14\x00\x01\x00\x00\x00"
        b"\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\t\xff\xc4\x00\x14\x10"
        b"\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )
