"""Repository for User model operations."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User
from src.utils.logger import get_logger

log = get_logger(__name__)


class UserRepository:
    """Repository for User lookups and login sync."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_uid(self, uid: str) -> Optional[User]:
        """Get user by identity-provider subject."""
        result = await self.session.execute(select(User).where(User.uid == uid))
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        uid: str,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> tuple[User, bool]:
        """
        Get existing user or create a new one.

        Returns:
            Tuple of (user, created) where created is True if user was newly created

        Caller is responsible for committing the transaction.
        """
        user = await self.get_by_uid(uid)
        now = datetime.now(timezone.utc)

        if user:
            values: dict = {"last_login_at": now, "updated_at": now}
            # Only overwrite profile fields the token actually carries
            if email is not None:
                values["email"] = email
            if display_name is not None:
                values["display_name"] = display_name
            await self.session.execute(update(User).where(User.id == user.id).values(**values))
            await self.session.flush()
            await self.session.refresh(user)
            return user, False

        user = User(uid=uid, email=email, display_name=display_name, last_login_at=now)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        log.info("user created", uid=uid, email=email)
        return user, True
