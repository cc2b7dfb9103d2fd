"""Pydantic models for delete image requests/responses."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import GalleryModel


class DeleteImageRequest(BaseModel):
    """Validation model for single image deletion."""

    model_config = ConfigDict(str_strip_whitespace=True)
    image_id: str = Field(
        ...,
        min_length=1,
        description="Image ID to delete",
    )


class BatchDeleteRequest(GalleryModel):
    """Validation model for bulk deletion; accepts ``imageIds`` or ``image_ids``."""

    image_ids: list[str] = Field(
        ...,
        min_length=1,
        description="Image IDs to delete",
    )


class DeleteOutcome(GalleryModel):
    id: str
    deleted: bool


class BatchDeleteResponse(GalleryModel):
    """Per-id outcome of a bulk deletion."""

    results: list[DeleteOutcome]
    deleted_count: int = Field(..., ge=0)
