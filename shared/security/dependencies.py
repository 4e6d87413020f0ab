from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from shared.config.settings import SESSION_COOKIE_NAME
from .jwt_handler import decode_session_token

# Documents the bearer alternative in OpenAPI; the cookie wins when both are sent
bearer_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def read_session_token(request: Request) -> Optional[str]:
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


def session_subject(request: Request) -> Optional[str]:
    token = read_session_token(request)
    claims = decode_session_token(token) if token else None
    return claims.get("sub") if claims else None


async def get_current_user(request: Request, _bearer: Optional[str] = Depends(bearer_scheme)) -> str:
    """Resolve the signed-in user's id from the session cookie or bearer header, or reject with 401."""
    user_id = session_subject(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.user_id = user_id
    return user_id
