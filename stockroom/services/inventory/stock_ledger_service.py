"""
Stock ledger: the only writer of ``stock_balances``.

A movement is one database transaction that updates the balance of a
(product, warehouse) pair and appends exactly one ``stock_transactions`` row.
Movements on the same pair are serialized three ways:

* an in-process lock per pair, so a worker never races itself;
* ``SELECT ... FOR UPDATE`` on the balance row (a no-op on SQLite);
* a conditional ``UPDATE ... WHERE quantity + :delta >= 0``, so the
  sufficiency check and the write are a single statement even across
  processes.
"""

import asyncio
from contextlib import asynccontextmanager

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.models.enums.transaction_type import TransactionType
from stockroom.schemas.inventory.stock_schemas import StockMovementData
from stockroom.services.inventory.stock_transaction_service import get_transaction
from stockroom.core.exceptions import AppException, InvalidQuantity, InsufficientStock
from stockroom.constants.error_codes import ErrorCode
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)


class PairLocks:
    """asyncio locks keyed by (product_id, warehouse_id), dropped once idle."""

    def __init__(self):
        self._entries: dict[tuple[int, int], list] = {}

    @asynccontextmanager
    async def hold(self, key: tuple[int, int]):
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[key]

    def __len__(self):
        return len(self._entries)


pair_locks = PairLocks()

# quantities and balances are 32-bit INTEGER columns
MAX_QUANTITY = 2_147_483_647


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)
    if quantity > MAX_QUANTITY:
        raise InvalidQuantity(quantity, f"Quantity must not exceed {MAX_QUANTITY}")
    return quantity


def _check_balance(available: int | None, quantity: int, delta: int) -> None:
    available = available or 0
    if available + delta < 0:
        raise InsufficientStock(available, quantity)
    if available + delta > MAX_QUANTITY:
        raise InvalidQuantity(quantity, f"Stock balance must not exceed {MAX_QUANTITY}")


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Unsupported database dialect: {dialect}")


async def _ensure_references(db: AsyncSession, product_id: int, warehouse_id: int):
    if not await db.scalar(select(Product.id).where(Product.id == product_id)):
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)

    if not await db.scalar(select(Warehouse.id).where(Warehouse.id == warehouse_id)):
        raise AppException(404, "Warehouse not found", ErrorCode.WAREHOUSE_NOT_FOUND)


async def _locked_quantity(db: AsyncSession, product_id: int, warehouse_id: int) -> int | None:
    return await db.scalar(
        select(StockBalance.quantity)
        .where(
            StockBalance.product_id == product_id,
            StockBalance.warehouse_id == warehouse_id,
        )
        .with_for_update()
    )


async def apply_stock_movement(
    db: AsyncSession,
    *,
    movement_type: TransactionType,
    product_id: int,
    warehouse_id: int,
    quantity: int,
    note: str | None,
    actor_user,
) -> StockMovementData:
    quantity = _validate_quantity(quantity)
    movement_type = TransactionType(movement_type)
    # read before any rollback can expire the instance
    actor_id = actor_user.id
    delta = quantity * movement_type.sign

    async with pair_locks.hold((product_id, warehouse_id)):
        try:
            await _ensure_references(db, product_id, warehouse_id)

            # ------------------------------------
            # 1. Create the balance row on first stock-in
            # ------------------------------------
            if movement_type is TransactionType.IN:
                insert = _insert_for(db)
                await db.execute(
                    insert(StockBalance)
                    .values(product_id=product_id, warehouse_id=warehouse_id, quantity=0)
                    .on_conflict_do_nothing(index_elements=["product_id", "warehouse_id"])
                )

            # ------------------------------------
            # 2. Lock the balance row and check it
            # ------------------------------------
            available = await _locked_quantity(db, product_id, warehouse_id)
            _check_balance(available, quantity, delta)

            # ------------------------------------
            # 3. Conditional write (check + act in one statement)
            # ------------------------------------
            new_balance = (
                await db.execute(
                    update(StockBalance)
                    .where(
                        StockBalance.product_id == product_id,
                        StockBalance.warehouse_id == warehouse_id,
                        StockBalance.quantity + delta >= 0,
                        StockBalance.quantity + delta <= MAX_QUANTITY,
                    )
                    .values(quantity=StockBalance.quantity + delta)
                    .returning(StockBalance.quantity)
                    .execution_options(synchronize_session=False)
                )
            ).scalar_one_or_none()

            if new_balance is None:
                # another writer moved the balance after our read
                available = await db.scalar(
                    select(StockBalance.quantity).where(
                        StockBalance.product_id == product_id,
                        StockBalance.warehouse_id == warehouse_id,
                    )
                )
                _check_balance(available, quantity, delta)
                raise AppException(
                    409,
                    "Concurrent stock update detected",
                    ErrorCode.STOCK_CONFLICT,
                )

            # ------------------------------------
            # 4. Append the ledger row
            # ------------------------------------
            transaction = StockTransaction(
                product_id=product_id,
                warehouse_id=warehouse_id,
                type=movement_type,
                quantity=quantity,
                note=note,
                user_id=actor_id,
            )
            db.add(transaction)
            await db.flush()

            await db.commit()

        except AppException as exc:
            await db.rollback()
            logger.info(
                "Stock movement rejected",
                extra={
                    "type": movement_type.value,
                    "product_id": product_id,
                    "warehouse_id": warehouse_id,
                    "quantity": quantity,
                    "error_code": exc.error_code,
                },
            )
            raise

        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Stock movement hit a constraint",
                extra={"product_id": product_id, "warehouse_id": warehouse_id},
            )
            raise AppException(
                409,
                "Concurrent stock update detected",
                ErrorCode.STOCK_CONFLICT,
            )

        except Exception:
            await db.rollback()
            raise

    logger.info(
        "Stock movement applied",
        extra={
            "transaction_id": transaction.id,
            "type": movement_type.value,
            "product_id": product_id,
            "warehouse_id": warehouse_id,
            "quantity": quantity,
            "balance": new_balance,
            "user_id": actor_id,
        },
    )

    return StockMovementData(
        transaction=await get_transaction(db, transaction.id),
        balance=new_balance,
    )


async def stock_in(
    db: AsyncSession,
    *,
    product_id: int,
    warehouse_id: int,
    quantity: int,
    note: str | None = None,
    actor_user,
) -> StockMovementData:
    return await apply_stock_movement(
        db,
        movement_type=TransactionType.IN,
        product_id=product_id,
        warehouse_id=warehouse_id,
        quantity=quantity,
        note=note,
        actor_user=actor_user,
    )


async def stock_out(
    db: AsyncSession,
    *,
    product_id: int,
    warehouse_id: int,
    quantity: int,
    note: str | None = None,
    actor_user,
) -> StockMovementData:
    return await apply_stock_movement(
        db,
        movement_type=TransactionType.OUT,
        product_id=product_id,
        warehouse_id=warehouse_id,
        quantity=quantity,
        note=note,
        actor_user=actor_user,
    )
