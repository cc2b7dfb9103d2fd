"""Business logic for user profiles relayed from the identity provider."""

from typing import Any

from aws_lambda_powertools import Logger

from core.container import Container
from core.models.errors import NotFoundError
from core.models.user import User, UserCreate, UserUpdate
from core.repositories.gallery_repository import GalleryRepository
from core.utils.constants import ERROR_CODE_USER_NOT_FOUND

logger = Logger(UTC=True)


def user_not_found(user_id: str) -> NotFoundError:
    return NotFoundError(
        message="User not found",
        error_code=ERROR_CODE_USER_NOT_FOUND,
        details={"user_id": user_id},
    )


class UserService:
    """Create, read and partially update user profiles."""

    def __init__(self, *, repository: GalleryRepository) -> None:
        self.repository = repository

    @classmethod
    def from_container(cls, container: Container) -> "UserService":
        return cls(repository=container.repository)

    def create_user(self, user: UserCreate) -> User:
        created = self.repository.create_user(user)
        logger.info("User created", extra={"user_id": created.id})
        return created

    def get_user(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if user is None:
            raise user_not_found(user_id)
        return user

    def update_user(self, user_id: str, update: UserUpdate) -> User:
        """Apply only the fields present in the request.

        A null email is ignored since email is required on every profile;
        null name or avatar clears the value.
        """
        fields: dict[str, Any] = update.model_dump(exclude_unset=True)
        if fields.get("email") is None:
            fields.pop("email", None)

        updated = self.repository.update_user(user_id, fields)
        if updated is None:
            raise user_not_found(user_id)

        logger.info(
            "User updated",
            extra={"user_id": user_id, "fields": sorted(fields)},
        )
        return updated
