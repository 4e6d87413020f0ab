from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer

from shared.config.database import Base


class Inventory(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_inventory_current_stock"),
        CheckConstraint("reorder_level >= 0", name="ck_inventory_reorder_level"),
    )

    inventory_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), unique=True, nullable=False)
    current_stock = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=0)
    last_restock_date = Column(DateTime(timezone=True))
