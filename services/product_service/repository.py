from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, store_errors, transaction

from .models import Product


class ProductRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, search: Optional[str] = None) -> list[Product]:
        query = select(Product).order_by(Product.product_name)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Product.product_name.ilike(pattern), Product.description.ilike(pattern)))
        with store_errors("list products", "product"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, product_id: int) -> Product:
        with store_errors("get product", "product"):
            result = await self.db.execute(select(Product).where(Product.product_id == product_id))
        product = result.scalars().first()
        if not product:
            raise NotFoundError("product")
        return product

    async def get_names(self, product_ids: list[int]) -> dict[int, str]:
        if not product_ids:
            return {}
        query = select(Product.product_id, Product.product_name).where(Product.product_id.in_(product_ids))
        with store_errors("get product names", "product"):
            result = await self.db.execute(query)
        return {row.product_id: row.product_name for row in result}

    async def create(self, product: Product) -> Product:
        async with transaction(self.db, "create product"):
            with store_errors("create product", "product"):
                self.db.add(product)
                await self.db.flush()
        await self.db.refresh(product)
        return product

    async def update(self, product_id: int, fields: dict) -> Product:
        async with transaction(self.db, "update product"):
            product = await self.get_by_id(product_id)
            for key, value in fields.items():
                setattr(product, key, value)
            with store_errors("update product", "product"):
                await self.db.flush()
        await self.db.refresh(product)
        return product

    async def delete(self, product_id: int) -> None:
        async with transaction(self.db, "delete product"):
            with store_errors("delete product", "product"):
                result = await self.db.execute(delete(Product).where(Product.product_id == product_id))
            if result.rowcount == 0:
                raise NotFoundError("product")
