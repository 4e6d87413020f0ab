from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_service.repository import UserRepository
from services.user_service.schemas import UserResponse
from shared.config.database import get_db
from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES, LOGIN_RATE_LIMIT, SESSION_COOKIE_NAME
from shared.security.dependencies import get_current_user
from shared.security.rate_limiter import limiter

from .schemas import LoginRequest, LoginResponse
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(db))


@router.post("/login", response_model=LoginResponse, summary="Authenticate and start a cookie session")
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    session = await service.login(payload)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.session_id,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=request.url.scheme == "https",
        samesite="lax",
    )
    return session


@router.post("/logout", summary="End the cookie session")
async def logout(response: Response):
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/", httponly=True)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse, summary="Get the current authenticated user's profile")
async def get_me(
    user_id: str = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return await service.current_user(user_id)
