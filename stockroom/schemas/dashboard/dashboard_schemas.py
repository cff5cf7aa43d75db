from pydantic import BaseModel
from typing import List

from stockroom.schemas.inventory.stock_schemas import StockTransactionOut


class WarehouseStockSummary(BaseModel):
    warehouse_id: int
    warehouse_name: str
    total_items: int
    total_quantity: int


class CategoryStockSummary(BaseModel):
    category_id: int
    category_name: str
    total_items: int
    total_quantity: int


class DashboardSummary(BaseModel):
    total_products: int
    total_warehouses: int
    total_stock_value: int
    low_stock_items: int
    low_stock_threshold: int
    recent_transactions: List[StockTransactionOut]
    stock_by_warehouse: List[WarehouseStockSummary]
    stock_by_category: List[CategoryStockSummary]
