from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.repository import ProductRepository
from shared.config.database import get_db

from .repository import InventoryRepository
from .schemas import InventoryCreate, InventoryResponse, InventoryUpdate, LowStockDetailResponse, StockUpdate
from .service import InventoryService

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def get_inventory_service(db: AsyncSession = Depends(get_db)) -> InventoryService:
    return InventoryService(InventoryRepository(db), ProductRepository(db))


@router.get("", response_model=list[InventoryResponse])
async def list_inventory(service: InventoryService = Depends(get_inventory_service)):
    return await service.list_inventory()


@router.post("", response_model=InventoryResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory(payload: InventoryCreate, service: InventoryService = Depends(get_inventory_service)):
    return await service.create_inventory(payload)


# Declared before /{inventory_id} so the literal paths win
@router.get("/low-stock", response_model=list[InventoryResponse])
async def low_stock(service: InventoryService = Depends(get_inventory_service)):
    return await service.low_stock_items()


@router.get("/low-stock/details", response_model=list[LowStockDetailResponse])
async def low_stock_details(service: InventoryService = Depends(get_inventory_service)):
    return await service.low_stock_details()


@router.get("/product/{product_id}", response_model=InventoryResponse)
async def get_inventory_by_product(product_id: int, service: InventoryService = Depends(get_inventory_service)):
    return await service.get_inventory_by_product(product_id)


@router.get("/{inventory_id}", response_model=InventoryResponse)
async def get_inventory(inventory_id: int, service: InventoryService = Depends(get_inventory_service)):
    return await service.get_inventory(inventory_id)


@router.put("/{inventory_id}", response_model=InventoryResponse)
async def update_inventory(
    inventory_id: int,
    payload: InventoryUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    return await service.update_inventory(inventory_id, payload)


@router.put("/{inventory_id}/stock", response_model=InventoryResponse)
async def update_stock(
    inventory_id: int,
    payload: StockUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    return await service.update_stock(inventory_id, payload.current_stock)


@router.delete("/{inventory_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory(inventory_id: int, service: InventoryService = Depends(get_inventory_service)):
    await service.delete_inventory(inventory_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
