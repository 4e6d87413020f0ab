from .dependencies import get_current_user, read_session_token
from .jwt_handler import decode_session_token, issue_session_token
from .passwords import hash_password, verify_password
from .rate_limiter import limiter

__all__ = [
    "decode_session_token",
    "get_current_user",
    "hash_password",
    "issue_session_token",
    "limiter",
    "read_session_token",
    "verify_password",
]
