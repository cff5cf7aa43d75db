from stockroom.models.masters.category_models import Category
from stockroom.models.masters.product_models import Product
from stockroom.models.masters.warehouse_models import Warehouse
from stockroom.core.db import AsyncSessionLocal
from stockroom.services.dashboard import dashboard_service
from stockroom.services.dashboard.dashboard_service import get_dashboard_summary
from stockroom.services.inventory.stock_ledger_service import stock_in, stock_out


async def _catalog(db, admin_user):
    tools = Category(name="Tools")
    empty = Category(name="Empty")
    db.add_all([tools, empty])
    await db.flush()

    hammer = Product(code="T-1", name="Hammer", unit="pcs", category_id=tools.id)
    saw = Product(code="T-2", name="Saw", unit="pcs", category_id=tools.id)
    loose = Product(code="X-1", name="Loose Part", unit="pcs")
    east = Warehouse(name="East")
    west = Warehouse(name="West")
    idle = Warehouse(name="Idle")
    db.add_all([hammer, saw, loose, east, west, idle])
    await db.commit()

    ids = {
        "tools": tools.id, "empty": empty.id,
        "hammer": hammer.id, "saw": saw.id, "loose": loose.id,
        "east": east.id, "west": west.id, "idle": idle.id,
    }

    await stock_in(db, product_id=ids["hammer"], warehouse_id=ids["east"], quantity=40, actor_user=admin_user)
    await stock_in(db, product_id=ids["hammer"], warehouse_id=ids["west"], quantity=5, actor_user=admin_user)
    await stock_in(db, product_id=ids["saw"], warehouse_id=ids["east"], quantity=20, actor_user=admin_user)
    await stock_out(db, product_id=ids["saw"], warehouse_id=ids["east"], quantity=12, actor_user=admin_user)
    await stock_in(db, product_id=ids["loose"], warehouse_id=ids["west"], quantity=100, actor_user=admin_user)
    return ids


async def test_summary_totals(db, admin_user):
    ids = await _catalog(db, admin_user)

    summary = await get_dashboard_summary(db)

    assert summary.total_products == 3
    assert summary.total_warehouses == 3
    # 40 + 5 + 8 + 100
    assert summary.total_stock_value == 153
    # hammer@west (5) and saw@east (8)
    assert summary.low_stock_items == 2
    assert summary.low_stock_threshold == 10

    by_wh = {w.warehouse_name: (w.total_items, w.total_quantity) for w in summary.stock_by_warehouse}
    assert by_wh == {"East": (2, 48), "Idle": (0, 0), "West": (2, 105)}
    assert [w.warehouse_name for w in summary.stock_by_warehouse] == ["East", "Idle", "West"]

    by_cat = {c.category_id: (c.total_items, c.total_quantity) for c in summary.stock_by_category}
    assert by_cat == {ids["tools"]: (2, 53), ids["empty"]: (0, 0)}


async def test_recent_transactions_newest_first(db, admin_user):
    await _catalog(db, admin_user)

    summary = await get_dashboard_summary(db, recent_limit=3)

    recent = summary.recent_transactions
    assert len(recent) == 3
    assert [(t.product_code, t.type.value, t.quantity) for t in recent] == [
        ("X-1", "in", 100),
        ("T-2", "out", 12),
        ("T-2", "in", 20),
    ]
    assert all(t.username == "admin" for t in recent)


async def test_total_matches_balances_endpoint(client, admin_headers, db, admin_user):
    await _catalog(db, admin_user)

    summary = (await client.get("/dashboard/summary", headers=admin_headers)).json()["data"]
    balances = (await client.get("/stock", headers=admin_headers)).json()["data"]["items"]

    assert summary["total_stock_value"] == sum(b["quantity"] for b in balances)
    assert len(summary["recent_transactions"]) == 5


async def test_empty_store(client, admin_headers):
    res = await client.get("/dashboard/summary", headers=admin_headers)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total_products"] == 0
    assert data["total_stock_value"] == 0
    assert data["low_stock_items"] == 0
    assert data["recent_transactions"] == []
    assert data["stock_by_warehouse"] == []
    assert data["stock_by_category"] == []


async def test_summary_reads_one_snapshot(monkeypatch, db, product, warehouse, admin_user):
    await stock_in(db, product_id=product.id, warehouse_id=warehouse.id, quantity=50, actor_user=admin_user)

    read_recent = dashboard_service.list_transactions

    async def recent_after_concurrent_receipt(session, **kwargs):
        # another request commits a movement while the summary is half read
        async with AsyncSessionLocal() as other:
            await stock_in(
                other, product_id=product.id, warehouse_id=warehouse.id,
                quantity=7, actor_user=admin_user,
            )
        return await read_recent(session, **kwargs)

    monkeypatch.setattr(dashboard_service, "list_transactions", recent_after_concurrent_receipt)

    summary = await get_dashboard_summary(db)

    assert summary.total_stock_value == 50
    assert sum(w.total_quantity for w in summary.stock_by_warehouse) == 50
    assert sum(c.total_quantity for c in summary.stock_by_category) == 50
    assert [t.quantity for t in summary.recent_transactions] == [50]

    monkeypatch.undo()
    fresh = await get_dashboard_summary(db)

    assert fresh.total_stock_value == 57
    assert sum(w.total_quantity for w in fresh.stock_by_warehouse) == 57
    assert len(fresh.recent_transactions) == 2
