from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from .dependencies import session_subject


def user_id_or_ip(request: Request) -> str:
    """
    Rate-limit bucket for a request: the signed-in user when a valid session
    is presented, otherwise the client address.
    """
    user_id = session_subject(request)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=user_id_or_ip)
