async def _move(client, headers, kind, product, warehouse, quantity, note=None):
    body = {
        "product_id": product.id,
        "warehouse_id": warehouse.id,
        "quantity": quantity,
    }
    if note is not None:
        body["note"] = note
    return await client.post(f"/stock/{kind}", json=body, headers=headers)


async def test_stock_in_returns_transaction_and_balance(client, admin_headers, product, warehouse):
    res = await _move(client, admin_headers, "in", product, warehouse, 50, note="PO-17")

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Stock received successfully"
    assert body["data"]["balance"] == 50

    tx = body["data"]["transaction"]
    assert tx["type"] == "in"
    assert tx["quantity"] == 50
    assert tx["note"] == "PO-17"
    assert tx["product_id"] == product.id
    assert tx["warehouse_id"] == warehouse.id
    assert tx["username"] == "admin"


async def test_stock_out_insufficient(client, admin_headers, product, warehouse):
    await _move(client, admin_headers, "in", product, warehouse, 5)

    res = await _move(client, admin_headers, "out", product, warehouse, 8)

    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["error_code"] == "INSUFFICIENT_STOCK"
    assert body["message"] == "Insufficient stock"
    assert body["details"] == {"available": 5, "requested": 8}

    txs = await client.get("/stock/transactions", headers=admin_headers)
    assert len(txs.json()["data"]) == 1


async def test_stock_out_success(client, admin_headers, product, warehouse):
    await _move(client, admin_headers, "in", product, warehouse, 5)

    res = await _move(client, admin_headers, "out", product, warehouse, 5)

    assert res.status_code == 200
    assert res.json()["message"] == "Stock shipped successfully"
    assert res.json()["data"]["balance"] == 0
    assert res.json()["data"]["transaction"]["type"] == "out"


async def test_non_positive_quantity_is_client_error(client, admin_headers, product, warehouse):
    for qty in (0, -3, True, "3", 2.5, "lots", None, 10**20, 2**31):
        res = await _move(client, admin_headers, "in", product, warehouse, qty)
        assert res.status_code == 400, qty
        assert res.json()["error_code"] == "INVALID_QUANTITY"

    txs = await client.get("/stock/transactions", headers=admin_headers)
    assert txs.json()["data"] == []

    res = await client.post(
        "/stock/in",
        json={"product_id": product.id, "warehouse_id": warehouse.id},
        headers=admin_headers,
    )
    assert res.status_code == 422
    assert res.json()["error_code"] == "VALIDATION_ERROR"


async def test_balance_overflow_is_client_error(client, admin_headers, product, warehouse):
    res = await _move(client, admin_headers, "in", product, warehouse, 2**31 - 1)
    assert res.status_code == 200

    res = await _move(client, admin_headers, "in", product, warehouse, 1)
    assert res.status_code == 400
    assert res.json()["error_code"] == "INVALID_QUANTITY"

    res = await client.get("/stock", headers=admin_headers)
    assert res.json()["data"]["items"][0]["quantity"] == 2**31 - 1


async def test_unknown_refs_are_404(client, admin_headers, warehouse):
    res = await client.post(
        "/stock/in",
        json={"product_id": 404, "warehouse_id": warehouse.id, "quantity": 1},
        headers=admin_headers,
    )
    assert res.status_code == 404
    assert res.json()["error_code"] == "PRODUCT_NOT_FOUND"


async def test_movements_need_write_role(client, viewer_headers, product, warehouse):
    res = await _move(client, viewer_headers, "in", product, warehouse, 1)
    assert res.status_code == 403
    assert res.json()["error_code"] == "PERMISSION_DENIED"


async def test_bad_tokens_are_rejected(client, admin_user, product, warehouse):
    res = await _move(client, {"Authorization": "Token abc"}, "in", product, warehouse, 1)
    assert res.status_code == 401

    res = await _move(client, {"Authorization": "Bearer not-a-jwt"}, "in", product, warehouse, 1)
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid or expired token"


async def test_list_balances_with_filters(client, admin_headers, db, product, warehouse):
    from stockroom.models.masters.product_models import Product

    bolt = Product(code="B-200", name="Hex Bolt", unit="box")
    db.add(bolt)
    await db.commit()

    await _move(client, admin_headers, "in", product, warehouse, 12)
    await _move(client, admin_headers, "in", bolt, warehouse, 3)

    res = await client.get("/stock", headers=admin_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 2
    # ordered by product name
    assert [i["product_code"] for i in data["items"]] == ["B-200", "P-001"]

    res = await client.get("/stock", params={"search": "usb"}, headers=admin_headers)
    items = res.json()["data"]["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 12
    assert items[0]["warehouse_name"] == "Main Warehouse"

    res = await client.get("/stock", params={"product_id": bolt.id}, headers=admin_headers)
    assert [i["quantity"] for i in res.json()["data"]["items"]] == [3]

    res = await client.get("/stock", params={"warehouse_id": 999}, headers=admin_headers)
    assert res.json()["data"] == {"total": 0, "items": []}


async def test_low_stock_listing(client, admin_headers, product, warehouse):
    await _move(client, admin_headers, "in", product, warehouse, 10)

    res = await client.get("/stock/low-stock", headers=admin_headers)
    assert [i["product_id"] for i in res.json()["data"]] == [product.id]

    await _move(client, admin_headers, "in", product, warehouse, 1)
    res = await client.get("/stock/low-stock", headers=admin_headers)
    assert res.json()["data"] == []


async def test_transactions_filter_and_order(client, admin_headers, product, warehouse):
    await _move(client, admin_headers, "in", product, warehouse, 10)
    await _move(client, admin_headers, "out", product, warehouse, 2)
    await _move(client, admin_headers, "out", product, warehouse, 3)

    res = await client.get("/stock/transactions", headers=admin_headers)
    assert res.status_code == 200
    assert [t["quantity"] for t in res.json()["data"]] == [3, 2, 10]

    res = await client.get("/stock/transactions", params={"type": "out"}, headers=admin_headers)
    assert [t["quantity"] for t in res.json()["data"]] == [3, 2]

    res = await client.get("/stock/transactions", params={"limit": 1}, headers=admin_headers)
    assert [t["quantity"] for t in res.json()["data"]] == [3]

    res = await client.get("/stock/transactions", params={"type": "sideways"}, headers=admin_headers)
    assert res.status_code == 422
