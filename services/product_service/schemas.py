from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    product_name: str = ""
    model: Optional[str] = None
    description: Optional[str] = None
    technical_specs: dict[str, Any] = Field(default_factory=dict)
    certifications: Optional[str] = None
    safety_standards: Optional[str] = None
    warranty_period: int = 0
    price: float = Field(default=0, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    pass


class ProductResponse(ProductBase):
    product_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
