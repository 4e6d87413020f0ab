"""
Cookie session login on top of the users table.

The session id handed to the browser is a signed JWT whose subject is the user
id, so no server-side session store is needed.
"""
import structlog
from fastapi import HTTPException, status

from services.user_service.models import User
from services.user_service.repository import UserRepository
from shared.errors import ValidationError
from shared.security.jwt_handler import issue_session_token
from shared.security.passwords import verify_password

from .schemas import LoginRequest, LoginResponse

logger = structlog.get_logger(__name__)


class AuthService:

    def __init__(self, users: UserRepository):
        self.users = users

    async def login(self, data: LoginRequest) -> LoginResponse:
        if not data.email or not data.password:
            raise ValidationError("email", "Email and password are required")

        user = await self.users.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning("login_failed", email=data.email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        await self.users.touch_last_login(user.user_id)
        token, expires_at = issue_session_token(user.user_id, user.role)
        logger.info("login_succeeded", user_id=user.user_id)
        return LoginResponse(
            user_id=user.user_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            session_id=token,
            expires_at=expires_at,
        )

    async def current_user(self, user_id: str) -> User:
        return await self.users.get_by_id(int(user_id))
