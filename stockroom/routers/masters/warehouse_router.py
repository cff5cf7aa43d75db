from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.db import get_db
from stockroom.schemas.masters.warehouse_schemas import (
    WarehouseCreate,
    WarehouseUpdate,
    WarehouseOut,
    WarehouseListData,
)
from stockroom.services.masters.warehouse_service import (
    create_warehouse,
    list_warehouses,
    get_warehouse,
    update_warehouse,
    delete_warehouse,
)
from stockroom.utils.check_roles import require_role, WRITE_ROLES
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


# =========================
# CREATE
# =========================
@router.post("/", response_model=APIResponse[WarehouseOut], status_code=201)
async def create_warehouse_api(
    payload: WarehouseCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    warehouse = await create_warehouse(db, payload, user)
    return success_response("Warehouse created successfully", warehouse)


# =========================
# LIST
# =========================
@router.get("/", response_model=APIResponse[WarehouseListData])
async def list_warehouses_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
):
    data = await list_warehouses(db, page, page_size)
    return success_response("Warehouses fetched successfully", data)


# =========================
# GET
# =========================
@router.get("/{warehouse_id}", response_model=APIResponse[WarehouseOut])
async def get_warehouse_api(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    warehouse = await get_warehouse(db, warehouse_id)
    return success_response("Warehouse fetched successfully", warehouse)


# =========================
# UPDATE
# =========================
@router.patch("/{warehouse_id}", response_model=APIResponse[WarehouseOut])
async def update_warehouse_api(
    warehouse_id: int,
    payload: WarehouseUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    warehouse = await update_warehouse(db, warehouse_id, payload, user)
    return success_response("Warehouse updated successfully", warehouse)


# =========================
# DELETE
# =========================
@router.delete("/{warehouse_id}", response_model=APIResponse[None])
async def delete_warehouse_api(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin"])),
):
    await delete_warehouse(db, warehouse_id)
    return success_response("Warehouse deleted")
