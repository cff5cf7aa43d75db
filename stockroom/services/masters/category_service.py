from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from stockroom.models.masters.category_models import Category
from stockroom.models.masters.product_models import Product
from stockroom.schemas.masters.category_schemas import CategoryCreate, CategoryOut
from stockroom.core.exceptions import AppException
from stockroom.constants.error_codes import ErrorCode
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)


async def list_categories(db: AsyncSession) -> list[CategoryOut]:
    result = await db.execute(select(Category).order_by(Category.name.asc()))
    return [CategoryOut.model_validate(c) for c in result.scalars().all()]


async def create_category(db: AsyncSession, payload: CategoryCreate) -> CategoryOut:
    name = payload.name.strip()
    if not name:
        raise AppException(400, "Category name is required", ErrorCode.VALIDATION_ERROR)

    category = Category(name=name)
    db.add(category)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AppException(
            409,
            "Category name already exists",
            ErrorCode.CATEGORY_NAME_EXISTS,
        )

    await db.refresh(category)
    logger.info("Category created", extra={"category_id": category.id})
    return CategoryOut.model_validate(category)


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await db.get(Category, category_id)
    if not category:
        raise AppException(404, "Category not found", ErrorCode.CATEGORY_NOT_FOUND)

    in_use = await db.scalar(
        select(Product.id).where(Product.category_id == category_id).limit(1)
    )
    if in_use:
        raise AppException(
            409,
            "Category is assigned to products",
            ErrorCode.CATEGORY_IN_USE,
        )

    await db.delete(category)
    await db.commit()
    logger.info("Category deleted", extra={"category_id": category_id})
