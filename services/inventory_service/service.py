import structlog

from services.product_service.repository import ProductRepository
from shared.errors import ValidationError

from .models import Inventory
from .repository import InventoryRepository
from .schemas import InventoryBase, InventoryCreate, InventoryUpdate

logger = structlog.get_logger(__name__)


def _validate_stock(current_stock: int) -> None:
    if current_stock < 0:
        raise ValidationError("current_stock", "Current stock cannot be negative")


def _validate(data: InventoryBase) -> None:
    if data.product_id <= 0:
        raise ValidationError("product_id", "Valid product ID is required")
    _validate_stock(data.current_stock)
    if data.reorder_level < 0:
        raise ValidationError("reorder_level", "Reorder level cannot be negative")


class InventoryService:

    def __init__(self, repository: InventoryRepository, products: ProductRepository):
        self.repository = repository
        self.products = products

    async def list_inventory(self) -> list[Inventory]:
        return await self.repository.get_all()

    async def get_inventory(self, inventory_id: int) -> Inventory:
        return await self.repository.get_by_id(inventory_id)

    async def get_inventory_by_product(self, product_id: int) -> Inventory:
        return await self.repository.get_by_product(product_id)

    async def create_inventory(self, data: InventoryCreate) -> Inventory:
        _validate(data)
        await self.products.get_by_id(data.product_id)
        inventory = await self.repository.create(Inventory(**data.model_dump()))
        logger.info("inventory_created", inventory_id=inventory.inventory_id, product_id=inventory.product_id)
        return inventory

    async def update_inventory(self, inventory_id: int, data: InventoryUpdate) -> Inventory:
        _validate(data)
        return await self.repository.update(inventory_id, data.model_dump())

    async def update_stock(self, inventory_id: int, current_stock: int) -> Inventory:
        _validate_stock(current_stock)
        inventory = await self.repository.update_stock(inventory_id, current_stock)
        logger.info("stock_updated", inventory_id=inventory_id, current_stock=current_stock)
        return inventory

    async def delete_inventory(self, inventory_id: int) -> None:
        await self.repository.delete(inventory_id)

    async def low_stock_items(self) -> list[Inventory]:
        return await self.repository.get_low_stock()

    async def low_stock_details(self) -> list[dict]:
        return await self.repository.get_low_stock_with_product()
