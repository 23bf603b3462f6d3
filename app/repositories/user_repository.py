from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def username_taken(self, username_lower: str, exclude_user_id: Optional[int] = None) -> bool:
        query = select(User.id).where(User.username_lower == username_lower)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def search(self, term: str, exclude_user_id: int, limit: int = 20) -> List[User]:
        """Case-insensitive substring match over name, username and phone."""
        pattern = f"%{term}%"
        result = await self.db.execute(
            select(User)
            .where(
                User.id != exclude_user_id,
                or_(
                    User.name.ilike(pattern),
                    User.username.ilike(pattern),
                    User.phone.ilike(pattern),
                ),
            )
            .order_by(User.name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        """Look up the owner of a stored refresh token (used for reuse detection)."""
        result = await self.db.execute(
            select(User).where(User.refresh_token == refresh_token)
        )
        return result.scalar_one_or_none()

    async def save_refresh_token(
        self,
        user: User,
        refresh_token: str,
        expires: datetime,
    ) -> None:
        user.refresh_token = refresh_token
        user.refresh_token_expires = expires
        await self.db.commit()

    async def revoke_refresh_token(self, user: User) -> None:
        """Drop the stored refresh token (logout or detected reuse)."""
        user.refresh_token = None
        user.refresh_token_expires = None
        await self.db.commit()

    async def create_user(self, user: User) -> User:
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def save(self, user: User) -> User:
        await self.db.commit()
        await self.db.refresh(user)
        return user
