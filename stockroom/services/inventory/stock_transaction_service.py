from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.models.users.user_models import User
from stockroom.models.enums.transaction_type import TransactionType
from stockroom.schemas.inventory.stock_schemas import StockTransactionOut
from stockroom.core.exceptions import AppException
from stockroom.constants.error_codes import ErrorCode
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TRANSACTION_LIMIT = 100
MAX_TRANSACTION_LIMIT = 1000


def _transaction_select():
    return (
        select(
            StockTransaction.id,
            StockTransaction.type,
            StockTransaction.quantity,
            StockTransaction.note,
            StockTransaction.product_id,
            Product.code.label("product_code"),
            Product.name.label("product_name"),
            Product.unit,
            StockTransaction.warehouse_id,
            Warehouse.name.label("warehouse_name"),
            StockTransaction.user_id,
            User.username,
            StockTransaction.created_at,
        )
        .join(Product, StockTransaction.product_id == Product.id)
        .join(Warehouse, StockTransaction.warehouse_id == Warehouse.id)
        .join(User, StockTransaction.user_id == User.id)
    )


def _map_transaction(row) -> StockTransactionOut:
    return StockTransactionOut(
        id=row.id,
        type=row.type,
        quantity=row.quantity,
        note=row.note,
        product_id=row.product_id,
        product_code=row.product_code,
        product_name=row.product_name,
        unit=row.unit,
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse_name,
        user_id=row.user_id,
        username=row.username,
        created_at=row.created_at,
    )


async def get_transaction(db: AsyncSession, transaction_id: int) -> StockTransactionOut:
    row = (
        await db.execute(
            _transaction_select().where(StockTransaction.id == transaction_id)
        )
    ).one_or_none()

    if row is None:
        raise AppException(404, "Transaction not found", ErrorCode.NOT_FOUND)

    return _map_transaction(row)


async def list_transactions(
    db: AsyncSession,
    *,
    product_id: int | None = None,
    warehouse_id: int | None = None,
    transaction_type: TransactionType | None = None,
    limit: int = DEFAULT_TRANSACTION_LIMIT,
) -> list[StockTransactionOut]:
    """Ledger entries, newest first.

    Ties on ``created_at`` (same-second inserts on SQLite) fall back to the
    insertion id so the order stays total.
    """
    stmt = _transaction_select()

    if product_id:
        stmt = stmt.where(StockTransaction.product_id == product_id)

    if warehouse_id:
        stmt = stmt.where(StockTransaction.warehouse_id == warehouse_id)

    if transaction_type:
        stmt = stmt.where(StockTransaction.type == transaction_type)

    limit = max(1, min(limit, MAX_TRANSACTION_LIMIT))
    stmt = stmt.order_by(
        StockTransaction.created_at.desc(),
        StockTransaction.id.desc(),
    ).limit(limit)

    rows = (await db.execute(stmt)).all()
    logger.debug("Transactions fetched", extra={"rows": len(rows)})

    return [_map_transaction(r) for r in rows]
