from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.db import get_db
from stockroom.models.enums.transaction_type import TransactionType
from stockroom.schemas.inventory.stock_schemas import (
    StockMovementRequest,
    StockMovementData,
    StockBalanceOut,
    StockBalanceListData,
    StockTransactionOut,
)
from stockroom.services.inventory.stock_ledger_service import stock_in, stock_out
from stockroom.services.inventory.stock_balance_service import (
    list_stock_balances,
    low_stock_balances,
)
from stockroom.services.inventory.stock_transaction_service import (
    list_transactions,
    DEFAULT_TRANSACTION_LIMIT,
    MAX_TRANSACTION_LIMIT,
)
from stockroom.utils.check_roles import require_role, WRITE_ROLES
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response

router = APIRouter(prefix="/stock", tags=["Stock"])


# =========================
# LIST BALANCES
# =========================
@router.get("", response_model=APIResponse[StockBalanceListData])
async def list_stock_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    search: str | None = Query(None, description="Search by product name or code"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
):
    data = await list_stock_balances(
        db=db,
        product_id=product_id,
        warehouse_id=warehouse_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    return success_response("Stock balances fetched successfully", data)


# =========================
# LOW STOCK
# =========================
@router.get("/low-stock", response_model=APIResponse[list[StockBalanceOut]])
async def low_stock_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    items = await low_stock_balances(db)
    return success_response("Low stock items fetched successfully", items)


# =========================
# STOCK IN
# =========================
@router.post("/in", response_model=APIResponse[StockMovementData])
async def stock_in_api(
    payload: StockMovementRequest,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    """Record received stock.

    `data` carries the new ledger row under `transaction` and the resulting
    balance of the (product, warehouse) pair under `balance`.
    """
    data = await stock_in(
        db,
        product_id=payload.product_id,
        warehouse_id=payload.warehouse_id,
        quantity=payload.quantity,
        note=payload.note,
        actor_user=user,
    )
    return success_response("Stock received successfully", data)


# =========================
# STOCK OUT
# =========================
@router.post("/out", response_model=APIResponse[StockMovementData])
async def stock_out_api(
    payload: StockMovementRequest,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    """Record shipped stock; 409 INSUFFICIENT_STOCK when the balance is short.

    Same response shape as `POST /stock/in`: `{transaction, balance}` under `data`.
    """
    data = await stock_out(
        db,
        product_id=payload.product_id,
        warehouse_id=payload.warehouse_id,
        quantity=payload.quantity,
        note=payload.note,
        actor_user=user,
    )
    return success_response("Stock shipped successfully", data)


# =========================
# TRANSACTIONS (LEDGER)
# =========================
@router.get("/transactions", response_model=APIResponse[list[StockTransactionOut]])
async def list_transactions_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    product_id: int | None = Query(None),
    warehouse_id: int | None = Query(None),
    type: TransactionType | None = Query(None),
    limit: int = Query(DEFAULT_TRANSACTION_LIMIT, ge=1, le=MAX_TRANSACTION_LIMIT),
):
    items = await list_transactions(
        db,
        product_id=product_id,
        warehouse_id=warehouse_id,
        transaction_type=type,
        limit=limit,
    )
    return success_response("Transactions fetched successfully", items)
