from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class InventoryBase(BaseModel):
    product_id: int = 0
    current_stock: int = 0
    reorder_level: int = 0
    last_restock_date: Optional[datetime] = None


class InventoryCreate(InventoryBase):
    pass


class InventoryUpdate(InventoryBase):
    pass


class StockUpdate(BaseModel):
    current_stock: int


class InventoryResponse(InventoryBase):
    inventory_id: int

    class Config:
        from_attributes = True


class LowStockDetailResponse(InventoryResponse):
    product_name: str
    price: float
