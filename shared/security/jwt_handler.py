from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_SECRET_KEY

ALGORITHM = "HS256"


def issue_session_token(user_id: int, role: str, lifetime: Optional[timedelta] = None) -> tuple[str, datetime]:
    """Sign a session token for the user. Returns the token and when it expires."""
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (lifetime or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": str(user_id), "role": role, "iat": issued_at, "exp": expires_at}
    return jwt.encode(claims, JWT_SECRET_KEY, algorithm=ALGORITHM), expires_at


def decode_session_token(token: str) -> Optional[dict]:
    # Expired and tampered tokens look the same to callers
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
