from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

QUOTATION_STATUSES = ("Pending", "Approved", "Rejected", "Expired")


class QuotationFields(BaseModel):
    customer_id: int = 0
    quote_date: Optional[datetime] = None
    validity_date: Optional[datetime] = None
    status: Optional[str] = None
    total_amount: float = 0


class QuotationItemCreate(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)
    line_total: Optional[float] = None

    def computed_line_total(self) -> float:
        if self.line_total is not None:
            return self.line_total
        return self.quantity * self.unit_price - self.discount


class QuotationCreateRequest(BaseModel):
    quotation: QuotationFields
    items: list[QuotationItemCreate] = Field(default_factory=list)


class QuotationUpdateRequest(BaseModel):
    quotation: QuotationFields
    # Omitted items leave the existing rows untouched
    items: Optional[list[QuotationItemCreate]] = None


class QuotationStatusUpdate(BaseModel):
    status: str


class QuotationResponse(BaseModel):
    quotation_id: int
    customer_id: int
    quote_date: datetime
    validity_date: datetime
    status: str
    total_amount: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuotationItemResponse(BaseModel):
    quotation_item_id: int
    quotation_id: int
    product_id: int
    quantity: int
    unit_price: float
    discount: float
    line_total: float

    class Config:
        from_attributes = True


class QuotationWithItemsResponse(BaseModel):
    quotation: QuotationResponse
    items: list[QuotationItemResponse]
