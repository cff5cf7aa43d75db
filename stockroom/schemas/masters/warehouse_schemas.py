from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    version: int


class WarehouseOut(BaseModel):
    id: int
    name: str
    location: Optional[str]
    version: int

    created_at: datetime
    updated_at: Optional[datetime]

    created_by: Optional[int]
    updated_by: Optional[int]
    created_by_name: Optional[str]
    updated_by_name: Optional[str]


class WarehouseListData(BaseModel):
    total: int
    items: List[WarehouseOut]
