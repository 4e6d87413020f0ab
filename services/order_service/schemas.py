from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OrderFields(BaseModel):
    customer_id: int = 0
    quotation_id: Optional[int] = None
    order_date: Optional[datetime] = None
    shipping_address: Optional[str] = None
    status: Optional[str] = None
    total_amount: float = 0


class OrderItemCreate(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)


class QuotationReference(BaseModel):
    quotation_id: Optional[int] = None


class OrderCreateRequest(BaseModel):
    order: OrderFields
    items: list[OrderItemCreate] = Field(default_factory=list)
    quotation: Optional[QuotationReference] = None


class OrderStatusUpdate(BaseModel):
    status: str


class OrderResponse(BaseModel):
    order_id: int
    customer_id: int
    quotation_id: Optional[int] = None
    order_date: datetime
    shipping_address: Optional[str] = None
    status: str
    total_amount: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderItemResponse(BaseModel):
    order_item_id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: float
    discount: float
    line_total: float

    class Config:
        from_attributes = True


class OrderWithItemsResponse(BaseModel):
    order: OrderResponse
    items: list[OrderItemResponse]
