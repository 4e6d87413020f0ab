from typing import Optional

import structlog

from shared.errors import ValidationError

from .models import Product
from .repository import ProductRepository
from .schemas import ProductBase, ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


class ProductService:

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    @staticmethod
    def _validate(data: ProductBase) -> None:
        if not data.product_name.strip():
            raise ValidationError("product_name", "Product name is required")

    async def list_products(self, search: Optional[str] = None) -> list[Product]:
        return await self.repository.get_all(search)

    async def get_product_by_id(self, product_id: int) -> Product:
        return await self.repository.get_by_id(product_id)

    async def create_product(self, data: ProductCreate) -> Product:
        self._validate(data)
        product = await self.repository.create(Product(**data.model_dump()))
        logger.info("product_created", product_id=product.product_id, price=product.price)
        return product

    async def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        self._validate(data)
        return await self.repository.update(product_id, data.model_dump())

    async def delete_product(self, product_id: int) -> None:
        await self.repository.delete(product_id)
        logger.info("product_deleted", product_id=product_id)
