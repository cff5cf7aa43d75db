from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from stockroom.core.db import Base
from stockroom.models.base.mixins import TimestampMixin


class StockBalance(Base, TimestampMixin):
    """Derived on-hand quantity per (product, warehouse). Written only by the stock ledger."""

    __tablename__ = "stock_balances"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), primary_key=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)

    product = relationship("Product", lazy="selectin")
    warehouse = relationship("Warehouse", lazy="selectin")

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_stock_balance_quantity_non_negative"),)

    def __repr__(self):
        return f"<StockBalance product_id={self.product_id} warehouse_id={self.warehouse_id} qty={self.quantity}>"
