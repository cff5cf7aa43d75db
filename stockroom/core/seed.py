from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD
from stockroom.core.security import hash_password
from stockroom.models.masters.category_models import Category
from stockroom.models.users.user_models import User
from stockroom.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Electronics", "Office Supplies", "Consumables", "Other"]


async def seed_default_data(db: AsyncSession) -> None:
    admin_exists = await db.scalar(
        select(User.id).where(User.username == DEFAULT_ADMIN_USERNAME)
    )
    if not admin_exists:
        db.add(
            User(
                username=DEFAULT_ADMIN_USERNAME,
                password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
                role="admin",
            )
        )
        logger.info("Default admin user created", extra={"username": DEFAULT_ADMIN_USERNAME})

    if not await db.scalar(select(func.count(Category.id))):
        db.add_all([Category(name=name) for name in DEFAULT_CATEGORIES])
        logger.info("Default categories created")

    await db.commit()
