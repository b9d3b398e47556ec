from sqlalchemy import select

from luxselle.models.transaction import Transaction


async def create_product(client, payload) -> dict:
    response = await client.post("/api/products", json=payload)
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_and_fetch_product(client, product_payload):
    created = await create_product(client, product_payload)

    response = await client.get(f"/api/products/{created['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["brand"] == "Hermes"
    assert data["sellPriceEur"] == 12500
    assert data["status"] == "in_stock"
    assert data["organisationId"] == "default"


async def test_update_only_touches_given_fields(client, product_payload):
    created = await create_product(client, product_payload)

    response = await client.put(f"/api/products/{created['id']}", json={"sellPriceEur": 13000})

    data = response.json()["data"]
    assert data["sellPriceEur"] == 13000
    assert data["costPriceEur"] == 9000
    assert data["model"] == "Birkin 30"


async def test_search_matches_brand_and_model(client, product_payload):
    await create_product(client, product_payload)
    await create_product(client, {**product_payload, "brand": "Chanel", "model": "Boy Bag"})

    response = await client.get("/api/products", params={"q": "birkin"})

    assert [p["model"] for p in response.json()["data"]] == ["Birkin 30"]


async def test_sell_records_sale_and_marks_sold(client, session_factory, product_payload):
    created = await create_product(client, product_payload)

    response = await client.post(f"/api/products/{created['id']}/sell", json={"amountEur": 12000})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["product"]["status"] == "sold"
    assert data["product"]["quantity"] == 0
    assert data["transaction"]["type"] == "sale"
    assert data["transaction"]["amountEur"] == 12000

    async with session_factory() as session:
        sales = (await session.execute(select(Transaction).where(Transaction.type == "sale"))).scalars().all()
        assert len(sales) == 1


async def test_sell_without_stock_is_rejected(client, product_payload):
    created = await create_product(client, {**product_payload, "quantity": 0})

    response = await client.post(f"/api/products/{created['id']}/sell", json={})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"


async def test_delete_product(client, product_payload):
    created = await create_product(client, product_payload)

    response = await client.delete(f"/api/products/{created['id']}")
    assert response.status_code == 204

    missing = await client.get(f"/api/products/{created['id']}")
    assert missing.status_code == 404


async def test_update_rejects_null_price(client, product_payload):
    created = await create_product(client, product_payload)

    response = await client.put(f"/api/products/{created['id']}", json={"sellPriceEur": None})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["path"] == "sellPriceEur"
