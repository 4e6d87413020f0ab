"""
Contacts belong to a customer. The scoped operations check that the customer
exists and that the contact is attached to it before touching the row.
"""
from typing import Optional

import structlog

from services.customer_service.repository import CustomerRepository
from shared.errors import NotFoundError, ValidationError

from .models import Contact
from .repository import ContactRepository
from .schemas import ContactBase, ContactCreate, ContactUpdate

logger = structlog.get_logger(__name__)


def _contact_fields(data: ContactBase) -> dict:
    if not data.first_name.strip() or not data.last_name.strip():
        raise ValidationError("name", "First name and last name are required")
    fields = data.model_dump()
    # Blank emails are stored as NULL so they never collide on the unique index
    fields["email"] = fields["email"] or None
    return fields


class ContactService:

    def __init__(self, repository: ContactRepository, customers: CustomerRepository):
        self.repository = repository
        self.customers = customers

    async def list_contacts(self, search: Optional[str] = None) -> list[Contact]:
        return await self.repository.get_all(search)

    async def get_contact(self, contact_id: int) -> Contact:
        return await self.repository.get_by_id(contact_id)

    async def email_exists(self, email: Optional[str]) -> bool:
        if not email or not email.strip():
            raise ValidationError("email", "Email is required")
        return await self.repository.email_exists(email)

    async def list_customer_contacts(self, customer_id: int) -> list[Contact]:
        await self.customers.get_by_id(customer_id)
        return await self.repository.get_by_customer(customer_id)

    async def get_customer_contact(self, customer_id: int, contact_id: int) -> Contact:
        await self.customers.get_by_id(customer_id)
        contact = await self.repository.get_by_id(contact_id)
        if contact.customer_id != customer_id:
            raise NotFoundError("contact", "Contact not found for this customer")
        return contact

    async def create_contact(self, customer_id: int, data: ContactCreate) -> Contact:
        await self.customers.get_by_id(customer_id)
        contact = await self.repository.create(Contact(customer_id=customer_id, **_contact_fields(data)))
        logger.info("contact_created", contact_id=contact.contact_id, customer_id=customer_id)
        return contact

    async def update_contact(self, customer_id: int, contact_id: int, data: ContactUpdate) -> Contact:
        await self.get_customer_contact(customer_id, contact_id)
        return await self.repository.update(contact_id, _contact_fields(data))

    async def delete_contact(self, customer_id: int, contact_id: int) -> None:
        await self.get_customer_contact(customer_id, contact_id)
        await self.repository.delete(contact_id)
        logger.info("contact_deleted", contact_id=contact_id, customer_id=customer_id)
