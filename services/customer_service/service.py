from typing import Optional

import structlog

from shared.errors import ValidationError

from .models import Customer
from .repository import CustomerRepository
from .schemas import CustomerCreate, CustomerUpdate

logger = structlog.get_logger(__name__)


def _require_company_name(company_name: Optional[str]) -> str:
    if not company_name or not company_name.strip():
        raise ValidationError("company_name", "Company name is required")
    return company_name


class CustomerService:

    def __init__(self, repository: CustomerRepository):
        self.repository = repository

    async def list_customers(self, search: Optional[str] = None) -> list[Customer]:
        return await self.repository.get_all(search)

    async def get_customer(self, customer_id: int) -> Customer:
        return await self.repository.get_by_id(customer_id)

    async def company_exists(self, company_name: Optional[str]) -> bool:
        return await self.repository.company_name_exists(_require_company_name(company_name))

    async def create_customer(self, data: CustomerCreate) -> Customer:
        _require_company_name(data.company_name)
        customer = await self.repository.create(Customer(**data.model_dump()))
        logger.info("customer_created", customer_id=customer.customer_id)
        return customer

    async def update_customer(self, customer_id: int, data: CustomerUpdate) -> Customer:
        _require_company_name(data.company_name)
        return await self.repository.update(customer_id, data.model_dump())

    async def delete_customer(self, customer_id: int) -> None:
        await self.repository.delete(customer_id)
        logger.info("customer_deleted", customer_id=customer_id)
