from pydantic import BaseModel, Field
from typing import Any, Optional, List
from datetime import datetime

from stockroom.models.enums.transaction_type import TransactionType


class StockMovementRequest(BaseModel):
    product_id: int
    warehouse_id: int
    # taken as sent; the ledger rejects anything but a positive integer
    # (booleans, numeric strings and floats included) with INVALID_QUANTITY
    quantity: Any = Field(
        ...,
        json_schema_extra={"type": "integer", "minimum": 1, "maximum": 2_147_483_647},
    )
    note: Optional[str] = Field(default=None, max_length=500)


class StockBalanceOut(BaseModel):
    product_id: int
    product_code: str
    product_name: str
    unit: str

    warehouse_id: int
    warehouse_name: str
    warehouse_location: Optional[str]

    quantity: int
    updated_at: Optional[datetime]


class StockBalanceListData(BaseModel):
    total: int
    items: List[StockBalanceOut]


class StockTransactionOut(BaseModel):
    id: int
    type: TransactionType
    quantity: int
    note: Optional[str]

    product_id: int
    product_code: str
    product_name: str
    unit: str

    warehouse_id: int
    warehouse_name: str

    user_id: int
    username: str

    created_at: datetime


class StockMovementData(BaseModel):
    transaction: StockTransactionOut
    balance: int
