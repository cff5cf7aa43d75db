"""
Shared fixtures.

The app reads its configuration from the environment at import time, so the
test environment is set up here before anything from ``stockroom`` is
imported. Every test gets a freshly created SQLite file database.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="stockroom-tests-")

os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_DB_DIR, "test.db")
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["LOW_STOCK_THRESHOLD"] = "10"

import pytest
from httpx import ASGITransport, AsyncClient

from stockroom.core.db import Base, engine, AsyncSessionLocal
from stockroom.core.security import create_access_token
from stockroom.models.users.user_models import User
from stockroom.models.masters.category_models import Category
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse

from main import app


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # pooled connections must not outlive the test's event loop
    await engine.dispose()


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


async def _make_user(db, username, role):
    user = User(username=username, password_hash="not-a-real-hash", role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    # detached, so a rollback in a test does not expire it
    db.expunge(user)
    return user


@pytest.fixture
async def admin_user(db):
    return await _make_user(db, "admin", "admin")


@pytest.fixture
async def clerk_user(db):
    return await _make_user(db, "clerk", "inventory")


@pytest.fixture
async def viewer_user(db):
    return await _make_user(db, "viewer", "viewer")


def bearer(user) -> dict:
    token = create_access_token(user.username, user.token_version)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def viewer_headers(viewer_user):
    return bearer(viewer_user)


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def category(db):
    cat = Category(name="Electronics")
    db.add(cat)
    await db.commit()
    await db.refresh(cat)
    # detached, so a rollback in a test does not expire it
    db.expunge(cat)
    return cat


@pytest.fixture
async def product(db, category, admin_user):
    p = Product(
        code="P-001",
        name="USB Cable",
        unit="pcs",
        category_id=category.id,
        created_by_id=admin_user.id,
    )
    db.add(p)
    await db.commit()
    await db.refresh(p)
    # detached, so a rollback in a test does not expire it
    db.expunge(p)
    return p


@pytest.fixture
async def warehouse(db, admin_user):
    wh = Warehouse(name="Main Warehouse", location="Osaka", created_by_id=admin_user.id)
    db.add(wh)
    await db.commit()
    await db.refresh(wh)
    # detached, so a rollback in a test does not expire it
    db.expunge(wh)
    return wh


@pytest.fixture
def headers_for():
    return bearer
