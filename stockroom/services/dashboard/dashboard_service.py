from sqlalchemy import select, func, distinct, text
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import LOW_STOCK_THRESHOLD
from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.masters.category_models import Category
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.schemas.dashboard.dashboard_schemas import (
    CategoryStockSummary,
    DashboardSummary,
    WarehouseStockSummary,
)
from stockroom.services.inventory.stock_transaction_service import list_transactions
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)

RECENT_TRANSACTIONS_LIMIT = 10


async def _pin_snapshot(db: AsyncSession) -> None:
    # end whatever the auth lookup started; isolation applies to a fresh connection
    await db.commit()

    dialect = db.get_bind().dialect.name

    # READ COMMITTED would let each sub-query see a different commit
    if dialect == "postgresql":
        await db.connection(
            execution_options={"isolation_level": "REPEATABLE READ"}
        )

    # the sqlite driver only opens a transaction before writes; without an
    # explicit BEGIN every SELECT reads the latest commit (WAL keeps writers unblocked)
    elif dialect == "sqlite":
        await db.execute(text("BEGIN"))


async def total_stock_quantity(db: AsyncSession) -> int:
    return await db.scalar(select(func.coalesce(func.sum(StockBalance.quantity), 0)))


async def low_stock_count(db: AsyncSession, threshold: int = LOW_STOCK_THRESHOLD) -> int:
    return await db.scalar(
        select(func.count(distinct(StockBalance.product_id))).where(
            StockBalance.quantity <= threshold
        )
    )


async def stock_by_warehouse(db: AsyncSession) -> list[WarehouseStockSummary]:
    rows = (
        await db.execute(
            select(
                Warehouse.id,
                Warehouse.name,
                func.count(distinct(StockBalance.product_id)).label("total_items"),
                func.coalesce(func.sum(StockBalance.quantity), 0).label("total_quantity"),
            )
            .outerjoin(StockBalance, StockBalance.warehouse_id == Warehouse.id)
            .group_by(Warehouse.id, Warehouse.name)
            .order_by(Warehouse.name.asc(), Warehouse.id.asc())
        )
    ).all()

    return [
        WarehouseStockSummary(
            warehouse_id=r.id,
            warehouse_name=r.name,
            total_items=r.total_items,
            total_quantity=r.total_quantity,
        )
        for r in rows
    ]


async def stock_by_category(db: AsyncSession) -> list[CategoryStockSummary]:
    rows = (
        await db.execute(
            select(
                Category.id,
                Category.name,
                func.count(distinct(StockBalance.product_id)).label("total_items"),
                func.coalesce(func.sum(StockBalance.quantity), 0).label("total_quantity"),
            )
            .outerjoin(Product, Product.category_id == Category.id)
            .outerjoin(StockBalance, StockBalance.product_id == Product.id)
            .group_by(Category.id, Category.name)
            .order_by(Category.name.asc(), Category.id.asc())
        )
    ).all()

    return [
        CategoryStockSummary(
            category_id=r.id,
            category_name=r.name,
            total_items=r.total_items,
            total_quantity=r.total_quantity,
        )
        for r in rows
    ]


async def get_dashboard_summary(
    db: AsyncSession,
    *,
    recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
    threshold: int = LOW_STOCK_THRESHOLD,
) -> DashboardSummary:
    """Composite dashboard figures, all read inside one database transaction.

    The transaction is closed before returning so the snapshot does not
    outlive the call.
    """
    await _pin_snapshot(db)

    try:
        summary = DashboardSummary(
            total_products=await db.scalar(select(func.count(Product.id))),
            total_warehouses=await db.scalar(select(func.count(Warehouse.id))),
            total_stock_value=await total_stock_quantity(db),
            low_stock_items=await low_stock_count(db, threshold),
            low_stock_threshold=threshold,
            recent_transactions=await list_transactions(db, limit=recent_limit),
            stock_by_warehouse=await stock_by_warehouse(db),
            stock_by_category=await stock_by_category(db),
        )
    finally:
        await db.commit()

    logger.debug(
        "Dashboard summary computed",
        extra={
            "total_products": summary.total_products,
            "total_stock_value": summary.total_stock_value,
        },
    )
    return summary
