from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, store_errors, transaction

from .models import User

DUPLICATE_EMAIL = "Email already exists"


class UserRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[User]:
        with store_errors("list users", "user"):
            result = await self.db.execute(select(User).order_by(User.email))
        return list(result.scalars().all())

    async def get_by_id(self, user_id: int) -> User:
        with store_errors("get user", "user"):
            result = await self.db.execute(select(User).where(User.user_id == user_id))
        user = result.scalars().first()
        if not user:
            raise NotFoundError("user")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        with store_errors("get user", "user"):
            result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def search(self, term: str) -> list[User]:
        pattern = f"%{term}%"
        full_name = User.first_name + " " + User.last_name
        query = select(User).where(or_(full_name.ilike(pattern), User.email.ilike(pattern))).order_by(User.email)
        with store_errors("search users", "user"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create(self, user: User) -> User:
        async with transaction(self.db, "create user"):
            with store_errors("create user", "user", duplicate_detail=DUPLICATE_EMAIL):
                self.db.add(user)
                await self.db.flush()
        await self.db.refresh(user)
        return user

    async def update(self, user_id: int, fields: dict) -> User:
        async with transaction(self.db, "update user"):
            user = await self.get_by_id(user_id)
            for key, value in fields.items():
                setattr(user, key, value)
            with store_errors("update user", "user", duplicate_detail=DUPLICATE_EMAIL):
                await self.db.flush()
        await self.db.refresh(user)
        return user

    async def update_password(self, user_id: int, password_hash: str) -> None:
        statement = update(User).where(User.user_id == user_id).values(password_hash=password_hash)
        async with transaction(self.db, "update password"):
            with store_errors("update password", "user"):
                result = await self.db.execute(statement)
            if result.rowcount == 0:
                raise NotFoundError("user")

    async def touch_last_login(self, user_id: int) -> datetime:
        now = datetime.now(timezone.utc)
        async with transaction(self.db, "record login"):
            with store_errors("record login", "user"):
                await self.db.execute(update(User).where(User.user_id == user_id).values(last_login=now))
        return now

    async def delete(self, user_id: int) -> None:
        async with transaction(self.db, "delete user"):
            with store_errors("delete user", "user"):
                result = await self.db.execute(delete(User).where(User.user_id == user_id))
            if result.rowcount == 0:
                raise NotFoundError("user")
