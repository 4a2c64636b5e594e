"""User service — the credential store.

Owns reads and inserts against the users table. It never commits: the
caller (AuthService) decides when the unit of work is complete, so a
later failure in the same request can still roll the insert back.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.db.models import User


class EmailTaken(Exception):
    """Raised when the store's unique constraint rejects an email."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Lookup and creation of user records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def create(self, name: str, email: str, password_hash: str) -> User:
        """Insert a user and flush so the unique constraint is checked now.

        Raises EmailTaken if another row already holds the email; the
        session is rolled back before raising.
        """
        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise EmailTaken(user.email) from e
        return user
