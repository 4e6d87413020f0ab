from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class Product(Base):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(255), unique=True, nullable=False)
    model = Column(String(100))
    description = Column(Text)
    technical_specs = Column(JSON, nullable=False, default=dict)
    certifications = Column(String)
    safety_standards = Column(String)
    warranty_period = Column(Integer, nullable=False, default=0)  # months
    price = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
