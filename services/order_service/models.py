from sqlalchemy import Column, Computed, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base

from .status import OrderStatus


class Order(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"), nullable=False, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.quotation_id"))
    order_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    shipping_address = Column(Text)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    total_amount = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class OrderItem(Base):
    __tablename__ = "order_items"

    order_item_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    # Generated by the store; never written by the application
    line_total = Column(Float, Computed("quantity * unit_price - discount", persisted=True))
