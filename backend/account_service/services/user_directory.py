"""Persistence of user records."""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from account_service.core.exceptions import UserAlreadyExistsError, UserNotFoundError
from account_service.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"first_name", "last_name", "phone_number"})


class UserDirectory:
    """
    Lookup and point writes on the ``users`` table.

    Login uniqueness is enforced by the table's unique index; ``create``
    turns a violation into ``UserAlreadyExistsError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_login(self, login: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.login == login))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: UUID) -> User:
        """Like ``find_by_id`` but raises ``UserNotFoundError`` for an unknown id."""
        user = await self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def list_all(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at, User.login))
        return list(result.scalars().all())

    async def create(
        self,
        first_name: str,
        last_name: str,
        phone_number: str,
        login: str,
        password_hash: str,
    ) -> User:
        """
        Insert a new user.

        Args:
            password_hash: Already hashed password.

        Returns:
            User: Created user with its generated id.

        Raises:
            UserAlreadyExistsError: if the login is taken.
        """
        user = User(
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            login=login,
            password=password_hash,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Duplicate login rejected by store: {login}")
            raise UserAlreadyExistsError()

        await self.db.refresh(user)
        logger.info(f"User created: {user.id}")
        return user

    async def update(self, user_id: UUID, fields: Dict[str, Any]) -> int:
        """Apply a partial update. Returns the number of updated rows (0 or 1)."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        if not fields:
            return 1 if await self.find_by_id(user_id) else 0

        result = await self.db.execute(
            update(User).where(User.id == user_id).values(**fields)
        )
        await self.db.commit()
        return result.rowcount

    async def remove(self, user_id: UUID) -> int:
        """Delete a user. Returns the number of deleted rows (0 or 1)."""
        result = await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        return result.rowcount
