"""
User upsert by email.
"""
import logging
from datetime import datetime, timezone
from typing import Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ValidationError, StorageError
from taskboard.models.user import User
from taskboard.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """Creates users on first sight and returns them unchanged afterwards."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str):
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def save_user(self, email: str, payload: Union[UserCreate, dict, None] = None) -> User:
        """
        Return the user with this email, inserting it first if it does not exist.

        The existing profile is never overwritten, so `timestamp` keeps the
        time of the first insert.
        """
        if not email or not email.strip():
            raise ValidationError("email is required", details={"field": "email"})
        if payload is None:
            payload = UserCreate()
        elif isinstance(payload, dict):
            payload = UserCreate.model_validate(payload)

        try:
            existing = await self.get_by_email(email)
            if existing:
                return existing

            user = User(
                email=email,
                name=payload.name,
                photo_url=payload.photo_url,
                extra=payload.payload_extra(),
                timestamp=datetime.now(timezone.utc),
            )
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            # Lost an insert race on the unique email; the other writer's row wins
            await self.db.rollback()
            return await self._existing_after_race(email, e)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving user {email}: {e}")
            raise StorageError("Failed to save user") from e

        logger.info(f"Created user {user.id} ({email})")
        return user

    async def _existing_after_race(self, email: str, race: IntegrityError) -> User:
        try:
            existing = await self.get_by_email(email)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error reloading user {email}: {e}")
            raise StorageError("Failed to save user") from e

        if existing is None:
            raise StorageError("Failed to save user") from race
        return existing
