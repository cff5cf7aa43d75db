# stockroom/schemas/masters/product_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ProductCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    unit: str = Field(..., min_length=1, max_length=20)
    category_id: Optional[int] = None


class ProductUpdate(BaseModel):
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=500)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=20)
    category_id: Optional[int] = None

    version: int


class ProductOut(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str]
    unit: str
    category_id: Optional[int]
    category_name: Optional[str]

    version: int

    created_by: Optional[int]
    updated_by: Optional[int]
    created_by_name: Optional[str]
    updated_by_name: Optional[str]

    created_at: datetime
    updated_at: Optional[datetime]


class ProductListData(BaseModel):
    total: int
    items: List[ProductOut]
