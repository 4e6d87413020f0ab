from typing import Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, store_errors, transaction

from .models import Customer


class CustomerRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, search: Optional[str] = None) -> list[Customer]:
        query = select(Customer).order_by(Customer.company_name)
        if search:
            query = query.where(Customer.company_name.ilike(f"%{search}%"))
        with store_errors("list customers", "customer"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, customer_id: int) -> Customer:
        with store_errors("get customer", "customer"):
            result = await self.db.execute(select(Customer).where(Customer.customer_id == customer_id))
        customer = result.scalars().first()
        if not customer:
            raise NotFoundError("customer")
        return customer

    async def company_name_exists(self, company_name: str) -> bool:
        with store_errors("check company name", "customer"):
            result = await self.db.execute(select(exists().where(Customer.company_name == company_name)))
        return bool(result.scalar())

    async def create(self, customer: Customer) -> Customer:
        async with transaction(self.db, "create customer"):
            with store_errors("create customer", "customer"):
                self.db.add(customer)
                await self.db.flush()
        await self.db.refresh(customer)
        return customer

    async def update(self, customer_id: int, fields: dict) -> Customer:
        async with transaction(self.db, "update customer"):
            customer = await self.get_by_id(customer_id)
            for key, value in fields.items():
                setattr(customer, key, value)
            with store_errors("update customer", "customer"):
                await self.db.flush()
        await self.db.refresh(customer)
        return customer

    async def delete(self, customer_id: int) -> None:
        # Contacts go with the customer through ON DELETE CASCADE
        async with transaction(self.db, "delete customer"):
            with store_errors("delete customer", "customer"):
                result = await self.db.execute(delete(Customer).where(Customer.customer_id == customer_id))
            if result.rowcount == 0:
                raise NotFoundError("customer")
