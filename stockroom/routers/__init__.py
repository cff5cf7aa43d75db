# stockroom/routers/__init__.py

from .auth.auth_router import router as auth_router

from .masters.category_router import router as category_router
from .masters.product_router import router as product_router
from .masters.warehouse_router import router as warehouse_router

from .inventory.stock_router import router as stock_router

from .dashboard.dashboard_router import router as dashboard_router


__all__ = [
"auth_router",

"category_router",
"product_router",
"warehouse_router",

"stock_router",

"dashboard_router",
]
