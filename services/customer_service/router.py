from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import CustomerRepository
from .schemas import CustomerCreate, CustomerExistsResponse, CustomerResponse, CustomerUpdate
from .service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: AsyncSession = Depends(get_db)) -> CustomerService:
    return CustomerService(CustomerRepository(db))


@router.get("", response_model=list[CustomerResponse])
async def list_customers(search: Optional[str] = None, service: CustomerService = Depends(get_customer_service)):
    return await service.list_customers(search)


@router.get("/check", response_model=CustomerExistsResponse)
async def check_company_name(
    company_name: Optional[str] = None,
    service: CustomerService = Depends(get_customer_service),
):
    return {"exists": await service.company_exists(company_name)}


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(payload: CustomerCreate, service: CustomerService = Depends(get_customer_service)):
    return await service.create_customer(payload)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    return await service.get_customer(customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.update_customer(customer_id, payload)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    await service.delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
