from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .repository import ProductRepository
from .schemas import ProductCreate, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, service: ProductService = Depends(get_product_service)):
    return await service.create_product(product)


@router.get("", response_model=list[ProductResponse])
async def list_products(
    search: str | None = Query(default=None),
    service: ProductService = Depends(get_product_service),
):
    return await service.list_products(search)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return await service.get_product_by_id(product_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update_product(product_id, product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
