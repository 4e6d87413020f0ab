from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.customer_service.repository import CustomerRepository
from services.product_service.repository import ProductRepository
from shared.config.database import get_db

from .repository import QuotationRepository
from .schemas import (
    QuotationCreateRequest,
    QuotationResponse,
    QuotationStatusUpdate,
    QuotationUpdateRequest,
    QuotationWithItemsResponse,
)
from .service import QuotationService

router = APIRouter(prefix="/quotations", tags=["Quotations"])


def get_quotation_service(db: AsyncSession = Depends(get_db)) -> QuotationService:
    return QuotationService(QuotationRepository(db), CustomerRepository(db), ProductRepository(db))


@router.get("", response_model=list[QuotationResponse])
async def list_quotations(
    customer_id: Optional[int] = None,
    service: QuotationService = Depends(get_quotation_service),
):
    return await service.list_quotations(customer_id)


@router.post("", response_model=QuotationWithItemsResponse, status_code=status.HTTP_201_CREATED)
async def create_quotation(payload: QuotationCreateRequest, service: QuotationService = Depends(get_quotation_service)):
    quotation, items = await service.create_quotation(payload)
    return {"quotation": quotation, "items": items}


@router.get("/{quotation_id}", response_model=QuotationWithItemsResponse)
async def get_quotation(quotation_id: int, service: QuotationService = Depends(get_quotation_service)):
    quotation, items = await service.get_quotation(quotation_id)
    return {"quotation": quotation, "items": items}


@router.put("/{quotation_id}", response_model=QuotationWithItemsResponse)
async def update_quotation(
    quotation_id: int,
    payload: QuotationUpdateRequest,
    service: QuotationService = Depends(get_quotation_service),
):
    quotation, items = await service.update_quotation(quotation_id, payload)
    return {"quotation": quotation, "items": items}


@router.post("/{quotation_id}/status", response_model=QuotationResponse)
async def update_quotation_status(
    quotation_id: int,
    payload: QuotationStatusUpdate,
    service: QuotationService = Depends(get_quotation_service),
):
    return await service.update_status(quotation_id, payload.status)


@router.get("/{quotation_id}/pdf")
async def quotation_pdf(quotation_id: int, service: QuotationService = Depends(get_quotation_service)):
    content = await service.render_pdf(quotation_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=quotation_{quotation_id}.pdf"},
    )


@router.delete("/{quotation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quotation(quotation_id: int, service: QuotationService = Depends(get_quotation_service)):
    await service.delete_quotation(quotation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
