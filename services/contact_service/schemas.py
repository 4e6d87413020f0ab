from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ContactBase(BaseModel):
    first_name: str = ""
    last_name: str = ""
    position: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ContactCreate(ContactBase):
    pass


class ContactUpdate(ContactBase):
    pass


class ContactResponse(ContactBase):
    contact_id: int
    customer_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContactEmailExistsResponse(BaseModel):
    exists: bool
