from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import OrderRepository
from .schemas import (
    OrderCreateRequest,
    OrderFields,
    OrderResponse,
    OrderStatusUpdate,
    OrderWithItemsResponse,
)
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(OrderRepository(db))


@router.get("", response_model=list[OrderResponse])
async def list_orders(customer_id: Optional[int] = None, service: OrderService = Depends(get_order_service)):
    return await service.list_orders(customer_id)


@router.post("", response_model=OrderWithItemsResponse, status_code=status.HTTP_201_CREATED)
async def create_order(payload: OrderCreateRequest, service: OrderService = Depends(get_order_service)):
    order, items = await service.create_order(payload)
    return {"order": order, "items": items}


@router.get("/{order_id}", response_model=OrderWithItemsResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    order, items = await service.get_order(order_id)
    return {"order": order, "items": items}


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: int, payload: OrderFields, service: OrderService = Depends(get_order_service)):
    return await service.update_order(order_id, payload)


@router.post("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    return await service.update_order_status(order_id, payload.status)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: int, service: OrderService = Depends(get_order_service)):
    await service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
