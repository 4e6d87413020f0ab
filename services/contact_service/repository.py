from typing import Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, store_errors, transaction

from .models import Contact


class ContactRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, search: Optional[str] = None) -> list[Contact]:
        query = select(Contact).order_by(Contact.last_name, Contact.first_name)
        if search:
            full_name = Contact.first_name + " " + Contact.last_name
            query = query.where(full_name.ilike(f"%{search}%"))
        with store_errors("list contacts", "contact"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_customer(self, customer_id: int) -> list[Contact]:
        query = (
            select(Contact)
            .where(Contact.customer_id == customer_id)
            .order_by(Contact.last_name, Contact.first_name)
        )
        with store_errors("list customer contacts", "contact"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, contact_id: int) -> Contact:
        with store_errors("get contact", "contact"):
            result = await self.db.execute(select(Contact).where(Contact.contact_id == contact_id))
        contact = result.scalars().first()
        if not contact:
            raise NotFoundError("contact")
        return contact

    async def email_exists(self, email: str) -> bool:
        with store_errors("check contact email", "contact"):
            result = await self.db.execute(select(exists().where(Contact.email == email)))
        return bool(result.scalar())

    async def create(self, contact: Contact) -> Contact:
        async with transaction(self.db, "create contact"):
            with store_errors("create contact", "contact", parent="customer"):
                self.db.add(contact)
                await self.db.flush()
        await self.db.refresh(contact)
        return contact

    async def update(self, contact_id: int, fields: dict) -> Contact:
        async with transaction(self.db, "update contact"):
            contact = await self.get_by_id(contact_id)
            for key, value in fields.items():
                setattr(contact, key, value)
            with store_errors("update contact", "contact", parent="customer"):
                await self.db.flush()
        await self.db.refresh(contact)
        return contact

    async def delete(self, contact_id: int) -> None:
        async with transaction(self.db, "delete contact"):
            with store_errors("delete contact", "contact"):
                result = await self.db.execute(delete(Contact).where(Contact.contact_id == contact_id))
            if result.rowcount == 0:
                raise NotFoundError("contact")
