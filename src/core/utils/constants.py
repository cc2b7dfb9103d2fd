"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "INVALID_FILE_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_TOO_LARGE"
ERROR_CODE_NO_FILES = "NO_FILES_UPLOADED"
ERROR_CODE_TOO_MANY_FILES = "TOO_MANY_FILES"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
ERROR_CODE_USER_NOT_FOUND = "USER_NOT_FOUND"

# Conflict Errors
ERROR_CODE_CONFLICT = "CONFLICT"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Metadata / Database Errors
ERROR_CODE_DATABASE = "DATABASE_ERROR"
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
MAX_AVATAR_SIZE = 5 * 1024 * 1024  # 5MB in bytes
MAX_FILES_PER_UPLOAD = 10

UPLOAD_FIELD_NAME = "images"
AVATAR_FIELD_NAME = "avatar"
IMAGE_MIME_PREFIX = "image/"

MIME_TYPE_EXTENSION_MAP: Final[dict[str, str]] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}

# ============================================================================
# Gallery Vocabulary
# ============================================================================

CATEGORY_LANDSCAPE = "landscape"
CATEGORY_PORTRAIT = "portrait"
CATEGORY_ABSTRACT = "abstract"
CATEGORY_NATURE = "nature"

DEFAULT_CATEGORY = CATEGORY_LANDSCAPE

# Evaluated in order; first match wins.
CATEGORY_KEYWORDS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    (CATEGORY_PORTRAIT, ("portrait", "face", "person")),
    (CATEGORY_ABSTRACT, ("abstract", "art")),
    (CATEGORY_NATURE, ("nature", "flower", "tree", "animal")),
)

GALLERY_CATEGORIES: Final[tuple[str, ...]] = (
    "All",
    "Landscape",
    "Portrait",
    "Abstract",
    "Nature",
)
ALL_CATEGORIES = "All"

IMAGE_ID_PREFIX = "img_"
IMAGE_KEY_PREFIX = "images"
AVATAR_KEY_PREFIX = "avatars"
ANONYMOUS_OWNER = "anonymous"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key,X-User-Id"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
USER_ID_HEADER = "x-user-id"
LOCAL_UPLOADS_URL_PREFIX = "/uploads"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DATABASE_URL = "DATABASE_URL"
ENV_METADATA_BACKEND = "GALLERY_METADATA_BACKEND"
ENV_BLOB_BACKEND = "GALLERY_BLOB_BACKEND"
ENV_UPLOAD_DIR = "UPLOAD_DIR"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_S3_PUBLIC_BASE_URL = "S3_PUBLIC_BASE_URL"
ENV_SUPABASE_URL = "SUPABASE_URL"
ENV_SUPABASE_ANON_KEY = "SUPABASE_ANON_KEY"

DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_UPLOAD_DIR = "uploads"

METADATA_BACKEND_MEMORY = "memory"
METADATA_BACKEND_SQL = "sql"
BLOB_BACKEND_LOCAL = "local"
BLOB_BACKEND_S3 = "s3"

METRICS_NAMESPACE = "ImageGallery"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb(limit: int = MAX_FILE_SIZE) -> int:
    """Get maximum file size in megabytes."""
    return limit // (1024 * 1024)
