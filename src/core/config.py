"""Environment-driven settings for the gallery service."""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.utils.constants import (
    BLOB_BACKEND_LOCAL,
    BLOB_BACKEND_S3,
    DEFAULT_AWS_REGION,
    DEFAULT_UPLOAD_DIR,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_BLOB_BACKEND,
    ENV_DATABASE_URL,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_METADATA_BACKEND,
    ENV_S3_PUBLIC_BASE_URL,
    ENV_SUPABASE_ANON_KEY,
    ENV_SUPABASE_URL,
    ENV_UPLOAD_DIR,
    METADATA_BACKEND_MEMORY,
    METADATA_BACKEND_SQL,
)


def _optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Settings:
    metadata_backend: str = METADATA_BACKEND_MEMORY
    blob_backend: str = BLOB_BACKEND_LOCAL

    database_url: str | None = None
    upload_dir: str = DEFAULT_UPLOAD_DIR

    # Object storage
    s3_bucket_name: str | None = None
    s3_public_base_url: str | None = None
    aws_endpoint_url: str | None = None
    aws_region: str = DEFAULT_AWS_REGION

    # Identity provider details handed to the client
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Read settings from the process environment.

        Backends are inferred from what is configured (a database URL
        selects the relational repository, a bucket selects object
        storage) unless set explicitly.
        """
        database_url = _optional(ENV_DATABASE_URL)
        bucket = _optional(ENV_IMAGE_S3_BUCKET_NAME)

        metadata_backend = _optional(ENV_METADATA_BACKEND) or (
            METADATA_BACKEND_SQL if database_url else METADATA_BACKEND_MEMORY
        )
        blob_backend = _optional(ENV_BLOB_BACKEND) or (
            BLOB_BACKEND_S3 if bucket else BLOB_BACKEND_LOCAL
        )

        return cls(
            metadata_backend=metadata_backend.lower(),
            blob_backend=blob_backend.lower(),
            database_url=database_url,
            upload_dir=_optional(ENV_UPLOAD_DIR) or DEFAULT_UPLOAD_DIR,
            s3_bucket_name=bucket,
            s3_public_base_url=_optional(ENV_S3_PUBLIC_BASE_URL),
            aws_endpoint_url=_optional(ENV_AWS_ENDPOINT_URL),
            aws_region=_optional(ENV_AWS_REGION) or DEFAULT_AWS_REGION,
            supabase_url=_optional(ENV_SUPABASE_URL),
            supabase_anon_key=_optional(ENV_SUPABASE_ANON_KEY),
        )
