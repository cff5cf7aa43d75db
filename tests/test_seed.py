from sqlalchemy import select, func

from stockroom.core.security import verify_password
from stockroom.core.seed import DEFAULT_CATEGORIES, seed_default_data
from stockroom.models.masters.category_models import Category
from stockroom.models.users.user_models import User


async def test_seed_is_idempotent(db):
    await seed_default_data(db)
    await seed_default_data(db)

    admins = (await db.execute(select(User).where(User.username == "admin"))).scalars().all()
    assert len(admins) == 1
    assert admins[0].role == "admin"
    assert verify_password("admin", admins[0].password_hash)

    assert await db.scalar(select(func.count(Category.id))) == len(DEFAULT_CATEGORIES)
