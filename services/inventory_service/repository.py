from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.models import Product
from shared.errors import NotFoundError, store_errors, transaction

from .models import Inventory


class InventoryRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[Inventory]:
        with store_errors("list inventory", "inventory item"):
            result = await self.db.execute(select(Inventory).order_by(Inventory.inventory_id))
        return list(result.scalars().all())

    async def get_by_id(self, inventory_id: int) -> Inventory:
        with store_errors("get inventory item", "inventory item"):
            result = await self.db.execute(select(Inventory).where(Inventory.inventory_id == inventory_id))
        inventory = result.scalars().first()
        if not inventory:
            raise NotFoundError("inventory item")
        return inventory

    async def get_by_product(self, product_id: int) -> Inventory:
        with store_errors("get inventory for product", "inventory item"):
            result = await self.db.execute(select(Inventory).where(Inventory.product_id == product_id))
        inventory = result.scalars().first()
        if not inventory:
            raise NotFoundError("inventory for product")
        return inventory

    async def create(self, inventory: Inventory) -> Inventory:
        async with transaction(self.db, "create inventory item"):
            with store_errors(
                "create inventory item",
                "inventory",
                parent="product",
                duplicate_detail="Inventory for this product already exists",
            ):
                self.db.add(inventory)
                await self.db.flush()
        await self.db.refresh(inventory)
        return inventory

    async def update(self, inventory_id: int, fields: dict) -> Inventory:
        async with transaction(self.db, "update inventory item"):
            inventory = await self.get_by_id(inventory_id)
            for key, value in fields.items():
                setattr(inventory, key, value)
            with store_errors(
                "update inventory item",
                "inventory",
                parent="product",
                duplicate_detail="Inventory with this information already exists",
            ):
                await self.db.flush()
        await self.db.refresh(inventory)
        return inventory

    async def update_stock(self, inventory_id: int, current_stock: int) -> Inventory:
        statement = (
            update(Inventory)
            .where(Inventory.inventory_id == inventory_id)
            .values(current_stock=current_stock, last_restock_date=datetime.now(timezone.utc))
        )
        async with transaction(self.db, "update stock level"):
            with store_errors("update stock level", "inventory"):
                result = await self.db.execute(statement)
            if result.rowcount == 0:
                raise NotFoundError("inventory item")
        inventory = await self.get_by_id(inventory_id)
        await self.db.refresh(inventory)
        return inventory

    async def delete(self, inventory_id: int) -> None:
        async with transaction(self.db, "delete inventory item"):
            with store_errors("delete inventory item", "inventory"):
                result = await self.db.execute(delete(Inventory).where(Inventory.inventory_id == inventory_id))
            if result.rowcount == 0:
                raise NotFoundError("inventory item")

    async def get_low_stock(self) -> list[Inventory]:
        # At or below the reorder level; the dashboard report uses a strict threshold
        query = (
            select(Inventory)
            .where(Inventory.current_stock <= Inventory.reorder_level)
            .order_by((Inventory.reorder_level - Inventory.current_stock).desc())
        )
        with store_errors("list low stock items", "inventory item"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_low_stock_with_product(self) -> list[dict]:
        query = (
            select(Inventory, Product.product_name, Product.price)
            .join(Product, Inventory.product_id == Product.product_id)
            .where(Inventory.current_stock <= Inventory.reorder_level)
            .order_by((Inventory.reorder_level - Inventory.current_stock).desc())
        )
        with store_errors("list low stock details", "inventory item"):
            result = await self.db.execute(query)
        return [
            {
                "inventory_id": inventory.inventory_id,
                "product_id": inventory.product_id,
                "current_stock": inventory.current_stock,
                "reorder_level": inventory.reorder_level,
                "last_restock_date": inventory.last_restock_date,
                "product_name": product_name,
                "price": price,
            }
            for inventory, product_name, price in result.all()
        ]
