# stockroom/services/masters/product_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, asc, desc, or_
from sqlalchemy.exc import IntegrityError

from stockroom.models.masters.product_models import Product
from stockroom.models.masters.category_models import Category
from stockroom.models.inventory.stock_balance_models import StockBalance
from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.schemas.masters.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ProductListData,
)
from stockroom.core.exceptions import AppException
from stockroom.constants.error_codes import ErrorCode
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)

ALLOWED_SORT_FIELDS = {
    "code": Product.code,
    "name": Product.name,
    "created_at": Product.created_at,
}


def _map_product(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        code=product.code,
        name=product.name,
        description=product.description,
        unit=product.unit,
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,

        version=product.version,

        created_by=product.created_by_id,
        updated_by=product.updated_by_id,
        created_by_name=product.created_by_name,
        updated_by_name=product.updated_by_name,

        created_at=product.created_at,
        updated_at=product.updated_at,
    )


async def _load_product(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    product = result.unique().scalar_one_or_none()
    if not product:
        raise AppException(
            404,
            "Product not found",
            ErrorCode.PRODUCT_NOT_FOUND,
        )
    return product


async def _ensure_category(db: AsyncSession, category_id: int | None) -> None:
    if category_id is None:
        return
    if not await db.get(Category, category_id):
        raise AppException(
            404,
            "Category not found",
            ErrorCode.CATEGORY_NOT_FOUND,
        )


# ---------------- CREATE ----------------
async def create_product(db: AsyncSession, payload: ProductCreate, user):
    exists = await db.scalar(
        select(Product.id).where(Product.code == payload.code)
    )
    if exists:
        raise AppException(
            409,
            "Product code already exists",
            ErrorCode.PRODUCT_CODE_EXISTS,
        )

    await _ensure_category(db, payload.category_id)

    product = Product(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )

    db.add(product)

    try:
        await db.commit()
    except IntegrityError:
        # lost a race on the unique code
        await db.rollback()
        raise AppException(
            409,
            "Product code already exists",
            ErrorCode.PRODUCT_CODE_EXISTS,
        )

    logger.info("Product created", extra={"product_id": product.id, "code": product.code})
    return _map_product(await _load_product(db, product.id))


# ---------------- LIST ----------------
async def list_products(
    *,
    db: AsyncSession,
    search: str | None,
    category_id: int | None,
    page: int,
    page_size: int,
    sort_by: str,
    order: str,
):
    filters = []

    if search:
        filters.append(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.code.ilike(f"%{search}%"),
            )
        )

    if category_id:
        filters.append(Product.category_id == category_id)

    sort_col = ALLOWED_SORT_FIELDS.get(sort_by)
    if sort_col is None:
        raise AppException(
            400,
            "Invalid sort field",
            ErrorCode.VALIDATION_ERROR,
        )

    order_by = desc(sort_col) if order == "desc" else asc(sort_col)

    result = await db.execute(
        select(Product)
        .where(*filters)
        .order_by(order_by, Product.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    products = result.unique().scalars().all()

    total = await db.scalar(
        select(func.count()).select_from(
            select(Product.id).where(*filters).subquery()
        )
    )

    return ProductListData(
        total=total or 0,
        items=[_map_product(p) for p in products],
    )


# ---------------- GET ----------------
async def get_product(db: AsyncSession, product_id: int):
    return _map_product(await _load_product(db, product_id))


# ---------------- UPDATE ----------------
async def update_product(
    db: AsyncSession,
    product_id: int,
    payload: ProductUpdate,
    user,
):
    current = await _load_product(db, product_id)

    updates = payload.model_dump(exclude_unset=True, exclude={"version"})
    if not updates:
        raise AppException(
            400,
            "No changes detected",
            ErrorCode.VALIDATION_ERROR,
        )

    if "code" in updates and updates["code"] != current.code:
        exists = await db.scalar(
            select(Product.id).where(
                Product.code == updates["code"],
                Product.id != product_id,
            )
        )
        if exists:
            raise AppException(
                409,
                "Product code already exists",
                ErrorCode.PRODUCT_CODE_EXISTS,
            )

    if "category_id" in updates:
        await _ensure_category(db, updates["category_id"])

    changes: list[str] = []
    for field, new_value in updates.items():
        old_value = getattr(current, field)
        if old_value != new_value:
            changes.append(f"{field}: {old_value} → {new_value}")

    if not changes:
        raise AppException(
            400,
            "No actual changes detected",
            ErrorCode.VALIDATION_ERROR,
        )

    # -------------------------------------------------
    # OPTIMISTIC UPDATE
    # -------------------------------------------------
    stmt = (
        update(Product)
        .where(
            Product.id == product_id,
            Product.version == payload.version,
        )
        .values(
            **updates,
            version=Product.version + 1,
            updated_by_id=user.id,
        )
        .returning(Product.id)
        .execution_options(synchronize_session=False)
    )

    try:
        updated_id = (await db.execute(stmt)).scalar_one_or_none()
    except IntegrityError:
        await db.rollback()
        raise AppException(
            409,
            "Product code already exists",
            ErrorCode.PRODUCT_CODE_EXISTS,
        )

    if updated_id is None:
        await db.rollback()
        raise AppException(
            409,
            "Product was modified by another process",
            ErrorCode.PRODUCT_VERSION_CONFLICT,
        )

    await db.commit()
    logger.info(
        "Product updated",
        extra={"product_id": product_id, "changes": ", ".join(changes)},
    )
    return _map_product(await _load_product(db, product_id))


# ---------------- DELETE ----------------
async def delete_product(db: AsyncSession, product_id: int) -> None:
    product = await _load_product(db, product_id)

    referenced = await db.scalar(
        select(StockBalance.product_id).where(StockBalance.product_id == product_id).limit(1)
    ) or await db.scalar(
        select(StockTransaction.id).where(StockTransaction.product_id == product_id).limit(1)
    )
    if referenced:
        raise AppException(
            409,
            "Product has stock or transaction history",
            ErrorCode.PRODUCT_IN_USE,
        )

    await db.delete(product)
    await db.commit()
    logger.info("Product deleted", extra={"product_id": product_id})
