from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    user_id: int
    email: str
    first_name: str
    last_name: str
    role: str
    session_id: str
    expires_at: datetime
