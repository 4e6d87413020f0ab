from typing import Optional

import structlog
from fastapi import HTTPException, status

from shared.errors import ValidationError
from shared.security.passwords import hash_password, verify_password

from .models import User
from .repository import UserRepository
from .schemas import PasswordChange, UserCreate, UserUpdate

logger = structlog.get_logger(__name__)


class UserService:

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def list_users(self) -> list[User]:
        return await self.repository.get_all()

    async def get_user(self, user_id: int) -> User:
        return await self.repository.get_by_id(user_id)

    async def search_users(self, term: Optional[str]) -> list[User]:
        if not term or not term.strip():
            raise ValidationError("q", "Search term is required")
        return await self.repository.search(term.strip())

    async def create_user(self, data: UserCreate) -> User:
        fields = data.model_dump(exclude={"password"})
        user = await self.repository.create(User(password_hash=hash_password(data.password), **fields))
        logger.info("user_created", user_id=user.user_id, role=user.role)
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        return await self.repository.update(user_id, data.model_dump())

    async def change_password(self, user_id: int, data: PasswordChange) -> None:
        user = await self.repository.get_by_id(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current password is incorrect",
            )
        await self.repository.update_password(user_id, hash_password(data.new_password))
        logger.info("password_changed", user_id=user_id)

    async def delete_user(self, user_id: int) -> None:
        await self.repository.delete(user_id)
        logger.info("user_deleted", user_id=user_id)
