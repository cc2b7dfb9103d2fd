"""Relational (SQLAlchemy) implementation of GalleryRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from aws_lambda_powertools import Logger
from sqlalchemy import Engine, create_engine, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.infrastructure.sql.models import Base, ImageRecord, UserRecord
from core.models.errors import ConflictError, DatabaseError
from core.models.image import Image, ImageCreate
from core.models.user import User, UserCreate
from core.repositories.gallery_repository import GalleryRepository, UserFields
from core.utils.constants import DEFAULT_CATEGORY
from core.utils.identifiers import generate_image_id
from core.utils.time import ensure_utc, utc_now

logger = Logger(UTC=True)


def _to_user(record: UserRecord) -> User:
    return User(
        id=record.id,
        email=record.email,
        full_name=record.full_name,
        avatar_url=record.avatar_url,
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
    )


def _to_image(record: ImageRecord) -> Image:
    return Image(
        id=record.id,
        filename=record.filename,
        original_name=record.original_name,
        mime_type=record.mime_type,
        size=record.size,
        category=record.category or DEFAULT_CATEGORY,
        uploaded_at=ensure_utc(record.uploaded_at),
        user_id=record.user_id,
    )


class SqlGalleryRepository(GalleryRepository):
    """Database-backed repository.

    Uniqueness of user id/email is enforced by the database; integrity
    violations become ConflictError, every other driver error becomes
    DatabaseError with a stable message.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs: Any) -> SqlGalleryRepository:
        """Create a repository with its own engine."""
        engine = create_engine(database_url, pool_pre_ping=True, **engine_kwargs)
        return cls(engine)

    def create_schema(self) -> None:
        """Create the users and images tables if they do not exist."""
        Base.metadata.create_all(self._engine)

    @contextmanager
    def _transaction(self, operation: str, **details: Any) -> Iterator[Session]:
        """Open a session/transaction and translate driver errors."""
        try:
            with self._session_factory() as session, session.begin():
                yield session

        except IntegrityError as exc:
            logger.warning(
                "Integrity constraint violated",
                extra={"operation": operation, **details},
            )
            raise ConflictError(
                message="A record with the same identifier or email already exists",
                details=details,
            ) from exc

        except SQLAlchemyError as exc:
            logger.exception(
                "Database operation failed",
                extra={"operation": operation, **details},
            )
            raise DatabaseError(
                message="Unable to access the gallery database",
                details=details,
            ) from exc

    def create_user(self, user: UserCreate) -> User:
        now = utc_now()
        record = UserRecord(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            created_at=now,
            updated_at=now,
        )

        with self._transaction("create_user", user_id=user.id) as session:
            session.add(record)

        logger.info("User created", extra={"user_id": user.id})
        return _to_user(record)

    def get_user(self, user_id: str) -> User | None:
        with self._transaction("get_user", user_id=user_id) as session:
            record = session.get(UserRecord, user_id)
            return _to_user(record) if record is not None else None

    def update_user(self, user_id: str, fields: UserFields) -> User | None:
        with self._transaction("update_user", user_id=user_id) as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                return None

            for name, value in fields.items():
                setattr(record, name, value)
            record.updated_at = utc_now()

        return _to_user(record)

    def get_images(self) -> list[Image]:
        with self._transaction("get_images") as session:
            records = session.scalars(
                select(ImageRecord).order_by(ImageRecord.uploaded_at.desc())
            ).all()
            return [_to_image(record) for record in records]

    def get_image(self, image_id: str) -> Image | None:
        with self._transaction("get_image", image_id=image_id) as session:
            record = session.get(ImageRecord, image_id)
            return _to_image(record) if record is not None else None

    def create_image(self, image: ImageCreate) -> Image:
        record = ImageRecord(
            id=generate_image_id(),
            filename=image.filename,
            original_name=image.original_name,
            mime_type=image.mime_type,
            size=image.size,
            category=image.category or DEFAULT_CATEGORY,
            uploaded_at=utc_now(),
            user_id=image.user_id,
        )

        with self._transaction("create_image", image_id=record.id) as session:
            session.add(record)

        logger.debug("Image metadata stored", extra={"image_id": record.id})
        return _to_image(record)

    def delete_image(self, image_id: str) -> bool:
        with self._transaction("delete_image", image_id=image_id) as session:
            result = session.execute(
                delete(ImageRecord).where(ImageRecord.id == image_id)
            )
            return bool(result.rowcount)
