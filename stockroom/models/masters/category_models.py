from sqlalchemy import Column, Integer, String, CheckConstraint
from stockroom.core.db import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True, index=True)

    __table_args__ = (CheckConstraint("length(name) > 0", name="ck_category_name_not_empty"),)

    def __repr__(self):
        return f"<Category id={self.id} name={self.name}>"
