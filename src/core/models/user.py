"""User profile models."""

from datetime import datetime

from pydantic import ConfigDict, Field, StrictStr

from core.models.image import GalleryModel


class UserCreate(GalleryModel):
    """Profile relayed from the identity provider on first sign-in."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: StrictStr = Field(..., min_length=1, description="Identity provider user id")
    email: StrictStr = Field(..., min_length=1, description="Unique email address")
    full_name: StrictStr | None = Field(None, description="Display name")
    avatar_url: StrictStr | None = Field(None, description="Avatar reference")


class UserUpdate(GalleryModel):
    """Partial profile update; only explicitly provided fields are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: StrictStr | None = Field(None, min_length=1)
    full_name: StrictStr | None = None
    avatar_url: StrictStr | None = None


class User(GalleryModel):
    """User profile returned by the gallery API."""

    id: StrictStr
    email: StrictStr
    full_name: StrictStr | None = None
    avatar_url: StrictStr | None = None
    created_at: datetime
    updated_at: datetime
