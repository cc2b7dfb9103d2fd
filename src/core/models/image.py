"""Shared image metadata models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from core.utils.constants import DEFAULT_CATEGORY


class GalleryModel(BaseModel):
    """Base model serializing to the camelCase JSON the gallery client expects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> dict[str, Any]:
        """Dump the model using camelCase keys and JSON-safe values."""
        return self.model_dump(by_alias=True, mode="json")


class ImageCreate(GalleryModel):
    """Fields supplied by the upload flow when recording a new image."""

    filename: StrictStr = Field(..., description="Storage reference (path or public URL)")
    original_name: StrictStr = Field(..., description="Original image file name")
    mime_type: StrictStr = Field(..., description="MIME type of the image (e.g. image/jpeg)")
    size: StrictInt = Field(..., ge=0, description="Image size in bytes")
    category: StrictStr | None = Field(None, description="Category tag")
    user_id: StrictStr | None = Field(None, description="Owning user identifier")


class Image(GalleryModel):
    """Image metadata returned by the gallery API."""

    id: StrictStr = Field(..., description="Unique image identifier")
    filename: StrictStr = Field(..., description="Storage reference (path or public URL)")
    original_name: StrictStr = Field(..., description="Original image file name")
    mime_type: StrictStr = Field(..., description="MIME type of the image (e.g. image/jpeg)")
    size: StrictInt = Field(..., description="Image size in bytes")
    category: StrictStr = Field(DEFAULT_CATEGORY, description="Category tag")
    uploaded_at: datetime = Field(..., description="Upload timestamp (UTC)")
    user_id: StrictStr | None = Field(None, description="Owning user identifier")


class RejectedFile(GalleryModel):
    """A file from an upload batch that failed validation."""

    original_name: StrictStr
    error: StrictStr
    message: StrictStr
