from luxselle.services.product_service import ProductService


async def test_validation_error_envelope(client):
    response = await client.post("/api/products", json={"model": "Birkin", "costPriceEur": -5})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Validation error"
    paths = {detail["path"] for detail in error["details"]}
    assert "brand" in paths
    assert "costPriceEur" in paths


async def test_not_found_envelope(client):
    response = await client.get("/api/products/missing")

    assert response.status_code == 404
    assert response.json() == {"error": {"code": "NOT_FOUND", "message": "Product not found"}}


async def test_unknown_route_uses_envelope(client):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_internal_error_is_hidden_and_counted(lenient_client, mocker):
    mocker.patch.object(ProductService, "list_products", side_effect=RuntimeError("db exploded"))

    response = await lenient_client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}}

    status = await lenient_client.get("/api/dashboard/status")
    assert status.json()["data"]["errorCounts"]["internal"] == 1


async def test_request_id_header(client):
    response = await client.get("/api/health", headers={"X-Request-Id": "abc123"})

    assert response.headers["x-request-id"] == "abc123"


async def test_settings_default_then_update(client):
    defaults = await client.get("/api/settings")
    assert defaults.json()["data"]["targetMarginPct"] == 35
    assert defaults.json()["data"]["receiveSellMarkup"] == 1.5

    updated = await client.put("/api/settings", json={"targetMarginPct": 40, "lowStockThreshold": 5})
    assert updated.status_code == 200
    assert updated.json()["data"]["targetMarginPct"] == 40

    reread = (await client.get("/api/settings")).json()["data"]
    assert reread["lowStockThreshold"] == 5
    assert reread["fxUsdToEur"] == 0.92


async def test_settings_rejects_out_of_range_margin(client):
    response = await client.put("/api/settings", json={"targetMarginPct": 150})

    assert response.status_code == 400


async def test_health(client):
    assert (await client.get("/api/health")).json()["status"] == "healthy"
    db = await client.get("/api/health/db")
    assert db.status_code == 200
    assert db.json()["database"] == "connected"
