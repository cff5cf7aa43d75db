from stockroom.core.db import AsyncSessionLocal
from stockroom.services.inventory.stock_ledger_service import stock_in


async def test_me(client, admin_headers):
    res = await client.get("/auth/me", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["data"]["username"] == "admin"
    assert res.json()["data"]["role"] == "admin"


async def test_product_lifecycle(client, admin_headers, category):
    res = await client.post(
        "/products/",
        json={"code": "K-9", "name": "Keyboard", "unit": "pcs", "category_id": category.id},
        headers=admin_headers,
    )
    assert res.status_code == 201
    product = res.json()["data"]
    assert product["category_name"] == "Electronics"
    assert product["version"] == 1
    assert product["created_by_name"] == "admin"

    dup = await client.post(
        "/products/",
        json={"code": "K-9", "name": "Other", "unit": "pcs"},
        headers=admin_headers,
    )
    assert dup.status_code == 409
    assert dup.json()["error_code"] == "PRODUCT_CODE_EXISTS"

    res = await client.patch(
        f"/products/{product['id']}",
        json={"name": "Mechanical Keyboard", "version": 1},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Mechanical Keyboard"
    assert res.json()["data"]["version"] == 2

    stale = await client.patch(
        f"/products/{product['id']}",
        json={"unit": "set", "version": 1},
        headers=admin_headers,
    )
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "PRODUCT_VERSION_CONFLICT"

    res = await client.get("/products/", params={"search": "mech"}, headers=admin_headers)
    assert res.json()["data"]["total"] == 1

    res = await client.delete(f"/products/{product['id']}", headers=admin_headers)
    assert res.status_code == 200

    res = await client.get(f"/products/{product['id']}", headers=admin_headers)
    assert res.status_code == 404


async def test_product_with_unknown_category(client, admin_headers):
    res = await client.post(
        "/products/",
        json={"code": "Z-1", "name": "Zip", "unit": "pcs", "category_id": 77},
        headers=admin_headers,
    )
    assert res.status_code == 404
    assert res.json()["error_code"] == "CATEGORY_NOT_FOUND"


async def test_delete_blocked_by_stock_history(client, admin_headers, admin_user, product, warehouse):
    async with AsyncSessionLocal() as session:
        await stock_in(
            session, product_id=product.id, warehouse_id=warehouse.id,
            quantity=1, actor_user=admin_user,
        )

    res = await client.delete(f"/products/{product.id}", headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["error_code"] == "PRODUCT_IN_USE"

    res = await client.delete(f"/warehouses/{warehouse.id}", headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["error_code"] == "WAREHOUSE_IN_USE"


async def test_warehouse_crud(client, admin_headers):
    res = await client.post(
        "/warehouses/",
        json={"name": "  Harbor  ", "location": "Kobe"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    wh = res.json()["data"]
    assert wh["name"] == "Harbor"

    blank = await client.post("/warehouses/", json={"name": "   "}, headers=admin_headers)
    assert blank.status_code == 400

    res = await client.patch(
        f"/warehouses/{wh['id']}",
        json={"location": "Kobe Port", "version": wh["version"]},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["location"] == "Kobe Port"

    res = await client.get("/warehouses/", headers=admin_headers)
    assert res.json()["data"]["total"] == 1

    res = await client.delete(f"/warehouses/{wh['id']}", headers=admin_headers)
    assert res.status_code == 200
    res = await client.get(f"/warehouses/{wh['id']}", headers=admin_headers)
    assert res.status_code == 404


async def test_category_rules(client, admin_headers, product, category):
    res = await client.post("/categories/", json={"name": "Electronics"}, headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_NAME_EXISTS"

    res = await client.delete(f"/categories/{category.id}", headers=admin_headers)
    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_IN_USE"

    res = await client.post("/categories/", json={"name": "Spare"}, headers=admin_headers)
    spare_id = res.json()["data"]["id"]
    res = await client.delete(f"/categories/{spare_id}", headers=admin_headers)
    assert res.status_code == 200

    res = await client.get("/categories/", headers=admin_headers)
    assert [c["name"] for c in res.json()["data"]] == ["Electronics"]


async def test_viewer_can_read_but_not_write(client, viewer_headers):
    assert (await client.get("/products/", headers=viewer_headers)).status_code == 200
    res = await client.post(
        "/warehouses/", json={"name": "Nope"}, headers=viewer_headers,
    )
    assert res.status_code == 403
