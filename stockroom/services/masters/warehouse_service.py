from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.schemas.masters.warehouse_schemas import (
    WarehouseCreate,
    WarehouseUpdate,
    WarehouseOut,
    WarehouseListData,
)
from stockroom.core.exceptions import AppException
from stockroom.constants.error_codes import ErrorCode
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# MAPPER
# =====================================================
def _map_warehouse(wh: Warehouse) -> WarehouseOut:
    return WarehouseOut(
        id=wh.id,
        name=wh.name,
        location=wh.location,
        version=wh.version,
        created_at=wh.created_at,
        updated_at=wh.updated_at,
        created_by=wh.created_by_id,
        updated_by=wh.updated_by_id,
        created_by_name=wh.created_by_name,
        updated_by_name=wh.updated_by_name,
    )


async def _load_warehouse(db: AsyncSession, warehouse_id: int) -> Warehouse:
    result = await db.execute(
        select(Warehouse)
        .where(Warehouse.id == warehouse_id)
        .execution_options(populate_existing=True)
    )
    warehouse = result.unique().scalar_one_or_none()
    if not warehouse:
        raise AppException(
            404,
            "Warehouse not found",
            ErrorCode.WAREHOUSE_NOT_FOUND,
        )
    return warehouse


# =====================================================
# CREATE WAREHOUSE
# =====================================================
async def create_warehouse(db: AsyncSession, payload: WarehouseCreate, user):
    name = payload.name.strip()
    if not name:
        raise AppException(400, "Warehouse name is required", ErrorCode.VALIDATION_ERROR)

    warehouse = Warehouse(
        name=name,
        location=payload.location,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(warehouse)
    await db.commit()

    logger.info("Warehouse created", extra={"warehouse_id": warehouse.id})
    return _map_warehouse(await _load_warehouse(db, warehouse.id))


# =====================================================
# LIST / GET
# =====================================================
async def list_warehouses(db: AsyncSession, page: int, page_size: int):
    total = await db.scalar(select(func.count(Warehouse.id)))

    result = await db.execute(
        select(Warehouse)
        .order_by(Warehouse.name.asc(), Warehouse.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return WarehouseListData(
        total=total or 0,
        items=[_map_warehouse(w) for w in result.unique().scalars().all()],
    )


async def get_warehouse(db: AsyncSession, warehouse_id: int):
    return _map_warehouse(await _load_warehouse(db, warehouse_id))


# =====================================================
# UPDATE WAREHOUSE (OPTIMISTIC LOCK)
# =====================================================
async def update_warehouse(
    db: AsyncSession,
    warehouse_id: int,
    payload: WarehouseUpdate,
    user,
):
    existing = await _load_warehouse(db, warehouse_id)

    updates = payload.model_dump(exclude_unset=True, exclude={"version"})
    if "name" in updates:
        if updates["name"] is None or not updates["name"].strip():
            raise AppException(400, "Warehouse name is required", ErrorCode.VALIDATION_ERROR)
        updates["name"] = updates["name"].strip()

    changes = [
        field for field, value in updates.items()
        if getattr(existing, field) != value
    ]
    if not changes:
        raise AppException(
            400,
            "No actual changes detected",
            ErrorCode.VALIDATION_ERROR,
        )

    stmt = (
        update(Warehouse)
        .where(
            Warehouse.id == warehouse_id,
            Warehouse.version == payload.version,
        )
        .values(
            **updates,
            version=Warehouse.version + 1,
            updated_by_id=user.id,
        )
        .returning(Warehouse.id)
        .execution_options(synchronize_session=False)
    )

    if (await db.execute(stmt)).scalar_one_or_none() is None:
        await db.rollback()
        raise AppException(
            409,
            "Warehouse was modified by another process",
            ErrorCode.WAREHOUSE_VERSION_CONFLICT,
        )

    await db.commit()
    logger.info(
        "Warehouse updated",
        extra={"warehouse_id": warehouse_id, "fields": changes},
    )
    return _map_warehouse(await _load_warehouse(db, warehouse_id))


# =====================================================
# DELETE WAREHOUSE
# =====================================================
async def delete_warehouse(db: AsyncSession, warehouse_id: int) -> None:
    warehouse = await _load_warehouse(db, warehouse_id)

    referenced = await db.scalar(
        select(StockBalance.warehouse_id).where(StockBalance.warehouse_id == warehouse_id).limit(1)
    ) or await db.scalar(
        select(StockTransaction.id).where(StockTransaction.warehouse_id == warehouse_id).limit(1)
    )
    if referenced:
        raise AppException(
            409,
            "Warehouse has stock or transaction history",
            ErrorCode.WAREHOUSE_IN_USE,
        )

    await db.delete(warehouse)
    await db.commit()
    logger.info("Warehouse deleted", extra={"warehouse_id": warehouse_id})
