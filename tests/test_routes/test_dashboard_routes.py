async def test_kpis(client, product_payload, buying_list_payload):
    await client.post("/api/products", json=product_payload)
    await client.post("/api/products", json={**product_payload, "model": "Kelly 25", "quantity": 3})
    await client.post("/api/products", json={**product_payload, "model": "Constance", "status": "sold"})
    await client.post("/api/buying-list", json=buying_list_payload)
    await client.post("/api/buying-list", json={**buying_list_payload, "status": "cancelled"})
    await client.post(
        "/api/sourcing",
        json={"customerName": "Ciara", "queryText": "Lindy 26", "budget": 8000},
    )

    response = await client.get("/api/dashboard/kpis")

    assert response.status_code == 200
    assert "no-store" in response.headers["cache-control"]
    assert response.json()["data"] == {
        "totalInventoryValue": 36000,
        "totalInventoryPotentialValue": 50000,
        "pendingBuyListValue": 5000,
        "activeSourcingPipeline": 8000,
        "lowStockAlerts": 1,
    }


async def test_profit_summary_prefers_sale_transactions(client, product_payload):
    created = await client.post("/api/products", json=product_payload)
    await client.post(f"/api/products/{created.json()['data']['id']}/sell", json={"amountEur": 12000})

    response = await client.get("/api/dashboard/profit-summary")

    assert response.json()["data"] == {
        "totalCost": 9000,
        "totalRevenue": 12000,
        "totalProfit": 3000,
        "marginPct": 25.0,
        "itemsSold": 1,
        "avgMarginPct": 28.0,
    }


async def test_profit_summary_empty(client):
    response = await client.get("/api/dashboard/profit-summary")

    data = response.json()["data"]
    assert data["itemsSold"] == 0
    assert data["marginPct"] == 0


async def test_activity_is_newest_first_and_limited(client, product_payload):
    for model in ("One", "Two", "Three"):
        await client.post("/api/products", json={**product_payload, "model": model})

    response = await client.get("/api/dashboard/activity", params={"limit": 2})

    events = response.json()["data"]
    assert len(events) == 2
    assert [e["payload"]["model"] for e in events] == ["Three", "Two"]


async def test_status_reports_ai_and_store(client):
    response = await client.get("/api/dashboard/status")

    data = response.json()["data"]
    assert data["aiRoutingMode"] == "dynamic"
    assert data["ai"]["providers"] == {"openai": False, "perplexity": False}
    assert data["storeBackend"] == "sqlite"
    assert data["lastSupplierImport"] is None
