from sqlalchemy import Column, Integer, String, ForeignKey, Index
from sqlalchemy.orm import relationship
from stockroom.core.db import Base
from stockroom.models.base.mixins import TimestampMixin, AuditMixin


class Product(Base, TimestampMixin, AuditMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    unit = Column(String(20), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    category = relationship("Category", lazy="selectin")

    __table_args__ = (Index("ix_product_name_category", "name", "category_id"),)

    def __repr__(self):
        return f"<Product id={self.id} code={self.code} name={self.name}>"
