from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.customer_service.repository import CustomerRepository
from shared.config.database import get_db

from .repository import ContactRepository
from .schemas import ContactCreate, ContactEmailExistsResponse, ContactResponse, ContactUpdate
from .service import ContactService

# Global lookups across every customer
router = APIRouter(prefix="/contacts", tags=["Contacts"])
# CRUD scoped to a single customer
customer_router = APIRouter(prefix="/customers/{customer_id}/contacts", tags=["Contacts"])


def get_contact_service(db: AsyncSession = Depends(get_db)) -> ContactService:
    return ContactService(ContactRepository(db), CustomerRepository(db))


@router.get("", response_model=list[ContactResponse])
async def list_contacts(search: Optional[str] = None, service: ContactService = Depends(get_contact_service)):
    return await service.list_contacts(search)


@router.get("/check", response_model=ContactEmailExistsResponse)
async def check_email(email: Optional[str] = None, service: ContactService = Depends(get_contact_service)):
    return {"exists": await service.email_exists(email)}


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(contact_id: int, service: ContactService = Depends(get_contact_service)):
    return await service.get_contact(contact_id)


@customer_router.get("", response_model=list[ContactResponse])
async def list_customer_contacts(customer_id: int, service: ContactService = Depends(get_contact_service)):
    return await service.list_customer_contacts(customer_id)


@customer_router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    customer_id: int,
    payload: ContactCreate,
    service: ContactService = Depends(get_contact_service),
):
    return await service.create_contact(customer_id, payload)


@customer_router.get("/{contact_id}", response_model=ContactResponse)
async def get_customer_contact(
    customer_id: int,
    contact_id: int,
    service: ContactService = Depends(get_contact_service),
):
    return await service.get_customer_contact(customer_id, contact_id)


@customer_router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    customer_id: int,
    contact_id: int,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
):
    return await service.update_contact(customer_id, contact_id, payload)


@customer_router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(customer_id: int, contact_id: int, service: ContactService = Depends(get_contact_service)):
    await service.delete_contact(customer_id, contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
