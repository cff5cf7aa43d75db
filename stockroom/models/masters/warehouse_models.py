from sqlalchemy import Column, Integer, String, CheckConstraint
from stockroom.core.db import Base
from stockroom.models.base.mixins import TimestampMixin, AuditMixin


class Warehouse(Base, TimestampMixin, AuditMixin):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    location = Column(String(255), nullable=True)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (CheckConstraint("length(name) > 0", name="ck_warehouse_name_not_empty"),)

    def __repr__(self):
        return f"<Warehouse id={self.id} name={self.name}>"
