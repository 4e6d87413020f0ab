from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import UserRepository
from .schemas import PasswordChange, UserCreate, UserResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))


@router.get("", response_model=list[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    return await service.list_users()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)):
    return await service.create_user(payload)


@router.get("/search", response_model=list[UserResponse])
async def search_users(q: Optional[str] = None, service: UserService = Depends(get_user_service)):
    return await service.search_users(q)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return await service.get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    return await service.update_user(user_id, payload)


@router.put("/{user_id}/password")
async def change_password(user_id: int, payload: PasswordChange, service: UserService = Depends(get_user_service)):
    await service.change_password(user_id, payload)
    return {"message": "Password updated successfully"}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
