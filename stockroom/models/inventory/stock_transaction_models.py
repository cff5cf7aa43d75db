from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from stockroom.core.db import Base
from stockroom.models.enums.transaction_type import TransactionType


class StockTransaction(Base):
    """Append-only ledger row. One per stock movement, never updated or deleted."""

    __tablename__ = "stock_transactions"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=False, index=True)
    type = Column(
        Enum(
            TransactionType,
            name="stock_transaction_type",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    quantity = Column(Integer, nullable=False)
    note = Column(String(500), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    product = relationship("Product", lazy="selectin")
    warehouse = relationship("Warehouse", lazy="selectin")
    user = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_transaction_quantity_positive"),
        Index("ix_stock_transaction_product_warehouse", "product_id", "warehouse_id"),
    )

    def __repr__(self):
        return f"<StockTransaction id={self.id} {self.type} product_id={self.product_id} warehouse_id={self.warehouse_id} qty={self.quantity}>"
