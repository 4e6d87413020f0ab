from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base


class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String(255), unique=True, nullable=False)
    industry = Column(String(100))
    address = Column(String)
    phone = Column(String(50))
    email = Column(String(255))
    website = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
