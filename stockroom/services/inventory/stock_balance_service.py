import time
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import LOW_STOCK_THRESHOLD
from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.schemas.inventory.stock_schemas import (
    StockBalanceOut,
    StockBalanceListData,
)
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)


def _balance_select():
    return (
        select(
            StockBalance.product_id,
            Product.code.label("product_code"),
            Product.name.label("product_name"),
            Product.unit,
            StockBalance.warehouse_id,
            Warehouse.name.label("warehouse_name"),
            Warehouse.location.label("warehouse_location"),
            StockBalance.quantity,
            func.coalesce(StockBalance.updated_at, StockBalance.created_at).label("updated_at"),
        )
        .join(Product, StockBalance.product_id == Product.id)
        .join(Warehouse, StockBalance.warehouse_id == Warehouse.id)
    )


def _map_balance(row) -> StockBalanceOut:
    return StockBalanceOut(
        product_id=row.product_id,
        product_code=row.product_code,
        product_name=row.product_name,
        unit=row.unit,
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse_name,
        warehouse_location=row.warehouse_location,
        quantity=row.quantity,
        updated_at=row.updated_at,
    )


async def list_stock_balances(
    db: AsyncSession,
    product_id: int | None,
    warehouse_id: int | None,
    search: str | None,
    page: int,
    page_size: int,
) -> StockBalanceListData:
    t0 = time.perf_counter()

    # -------------------------------------------------
    # BUILD FILTERS
    # -------------------------------------------------
    filters = []

    if product_id:
        filters.append(StockBalance.product_id == product_id)

    if warehouse_id:
        filters.append(StockBalance.warehouse_id == warehouse_id)

    if search:
        filters.append(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.code.ilike(f"%{search}%"),
            )
        )

    # -------------------------------------------------
    # SINGLE QUERY, TOTAL VIA WINDOW
    # -------------------------------------------------
    stmt = (
        _balance_select()
        .add_columns(func.count().over().label("total"))
        .where(*filters)
        .order_by(Product.name.asc(), Warehouse.name.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    rows = (await db.execute(stmt)).all()

    logger.info(
        "[STOCK] list_stock_balances",
        extra={
            "rows": len(rows),
            "page": page,
            "page_size": page_size,
            "t_total": round(time.perf_counter() - t0, 4),
        },
    )

    if not rows:
        return StockBalanceListData(total=0, items=[])

    return StockBalanceListData(
        total=rows[0].total,
        items=[_map_balance(r) for r in rows],
    )


# =====================================================
# LOW STOCK ALERTS
# =====================================================
async def low_stock_balances(
    db: AsyncSession,
    threshold: int = LOW_STOCK_THRESHOLD,
) -> list[StockBalanceOut]:
    logger.info("Fetch low stock balances", extra={"threshold": threshold})

    result = await db.execute(
        _balance_select()
        .where(StockBalance.quantity <= threshold)
        .order_by(StockBalance.quantity.asc(), Product.name.asc())
    )

    return [_map_balance(r) for r in result.all()]
