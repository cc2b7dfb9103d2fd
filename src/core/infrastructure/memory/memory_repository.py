"""In-memory implementation of GalleryRepository.

Data lives for the lifetime of the process only; useful for local
development and tests.
"""

from aws_lambda_powertools import Logger

from core.models.errors import ConflictError
from core.models.image import Image, ImageCreate
from core.models.user import User, UserCreate
from core.repositories.gallery_repository import GalleryRepository, UserFields
from core.utils.constants import DEFAULT_CATEGORY
from core.utils.identifiers import generate_image_id
from core.utils.time import utc_now

logger = Logger(UTC=True)


class InMemoryGalleryRepository(GalleryRepository):
    """Dict-backed repository enforcing the same uniqueness rules as the database."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._images: dict[str, Image] = {}

    def _email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        return any(
            user.email == email and user.id != exclude_id
            for user in self._users.values()
        )

    def create_user(self, user: UserCreate) -> User:
        if user.id in self._users or self._email_taken(user.email):
            logger.info("User already exists", extra={"user_id": user.id})
            raise ConflictError(
                message="User already exists",
                details={"user_id": user.id},
            )

        now = utc_now()
        created = User(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            created_at=now,
            updated_at=now,
        )
        self._users[created.id] = created
        return created

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def update_user(self, user_id: str, fields: UserFields) -> User | None:
        existing = self._users.get(user_id)
        if existing is None:
            return None

        email = fields.get("email")
        if email and self._email_taken(email, exclude_id=user_id):
            raise ConflictError(
                message="Email is already in use",
                details={"user_id": user_id},
            )

        updated = existing.model_copy(update={**fields, "updated_at": utc_now()})
        self._users[user_id] = updated
        return updated

    def get_images(self) -> list[Image]:
        return sorted(
            self._images.values(),
            key=lambda image: image.uploaded_at,
            reverse=True,
        )

    def get_image(self, image_id: str) -> Image | None:
        return self._images.get(image_id)

    def create_image(self, image: ImageCreate) -> Image:
        created = Image(
            id=generate_image_id(),
            filename=image.filename,
            original_name=image.original_name,
            mime_type=image.mime_type,
            size=image.size,
            category=image.category or DEFAULT_CATEGORY,
            uploaded_at=utc_now(),
            user_id=image.user_id,
        )
        self._images[created.id] = created

        logger.debug("Image metadata stored", extra={"image_id": created.id})
        return created

    def delete_image(self, image_id: str) -> bool:
        return self._images.pop(image_id, None) is not None
