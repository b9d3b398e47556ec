import pytest
from sqlalchemy import func, select

from luxselle.models.activity_event import ActivityEvent
from luxselle.models.buying_list import BuyingListItem
from luxselle.models.product import Product
from luxselle.models.transaction import Transaction
from luxselle.services.activity_logger import ActivityLogger


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def create_item(client, payload) -> dict:
    response = await client.post("/api/buying-list", json=payload)
    assert response.status_code == 201
    return response.json()["data"]


async def test_receive_creates_product_and_purchase(client, session_factory, buying_list_payload):
    item = await create_item(client, buying_list_payload)

    response = await client.post(f"/api/buying-list/{item['id']}/receive")

    assert response.status_code == 200
    data = response.json()["data"]
    product = data["product"]
    assert data["buyingListItem"]["status"] == "received"
    assert product["brand"] == "Chanel"
    assert product["model"] == "Classic Flap"
    assert product["costPriceEur"] == 5000
    assert product["sellPriceEur"] == 7500
    assert product["status"] == "in_stock"
    assert product["quantity"] == 1

    async with session_factory() as session:
        purchases = (await session.execute(select(Transaction))).scalars().all()
        assert len(purchases) == 1
        assert purchases[0].type == "purchase"
        assert purchases[0].amount_eur == 5000
        assert purchases[0].product_id == product["id"]
        assert purchases[0].buying_list_item_id == item["id"]

        events = (
            await session.execute(select(ActivityEvent).where(ActivityEvent.event_type == "buylist_received"))
        ).scalars().all()
        assert len(events) == 1
        assert events[0].entity_id == item["id"]


async def test_receive_uses_configured_markup(client, buying_list_payload):
    await client.put("/api/settings", json={"receiveSellMarkup": 2.0})
    item = await create_item(client, {**buying_list_payload, "targetBuyPriceEur": 1234.5})

    response = await client.post(f"/api/buying-list/{item['id']}/receive")

    assert response.status_code == 200
    assert response.json()["data"]["product"]["sellPriceEur"] == 2469.0


async def test_receive_twice_is_rejected(client, session_factory, buying_list_payload):
    item = await create_item(client, buying_list_payload)
    first = await client.post(f"/api/buying-list/{item['id']}/receive")
    assert first.status_code == 200

    second = await client.post(f"/api/buying-list/{item['id']}/receive")

    assert second.status_code == 400
    body = second.json()
    assert body["error"]["code"] == "BAD_REQUEST"
    assert "already received" in body["error"]["message"]
    assert await count_rows(session_factory, Product) == 1
    assert await count_rows(session_factory, Transaction) == 1


async def test_receive_unknown_item(client, session_factory):
    response = await client.post("/api/buying-list/does-not-exist/receive")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
    assert await count_rows(session_factory, Product) == 0
    assert await count_rows(session_factory, Transaction) == 0


async def test_receive_rolls_back_when_a_step_fails(lenient_client, session_factory, buying_list_payload, mocker):
    item = await create_item(lenient_client, buying_list_payload)
    events_before = await count_rows(session_factory, ActivityEvent)
    mocker.patch.object(ActivityLogger, "log_activity", side_effect=RuntimeError("activity store down"))

    response = await lenient_client.post(f"/api/buying-list/{item['id']}/receive")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    assert await count_rows(session_factory, Product) == 0
    assert await count_rows(session_factory, Transaction) == 0
    assert await count_rows(session_factory, ActivityEvent) == events_before
    async with session_factory() as session:
        stored = await session.get(BuyingListItem, item["id"])
        assert stored.status == "pending"


async def test_received_status_cannot_be_set_directly(client, buying_list_payload):
    item = await create_item(client, buying_list_payload)

    response = await client.put(f"/api/buying-list/{item['id']}", json={"status": "received"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("sort", ["targetBuyPriceEur", "brand"])
async def test_list_sorting_and_cursor(client, buying_list_payload, sort):
    for brand, price in (("Chanel", 3000), ("Dior", 1000), ("Celine", 2000)):
        await create_item(client, {**buying_list_payload, "brand": brand, "targetBuyPriceEur": price})

    first = await client.get("/api/buying-list", params={"sort": sort, "dir": "asc", "limit": 2})
    assert first.status_code == 200
    page = first.json()
    assert page["total"] == 3
    assert len(page["data"]) == 2
    assert page["nextCursor"]

    second = await client.get(
        "/api/buying-list", params={"sort": sort, "dir": "asc", "limit": 2, "cursor": page["nextCursor"]}
    )
    rest = second.json()
    assert len(rest["data"]) == 1
    assert rest["nextCursor"] is None

    values = [row[sort] for row in page["data"] + rest["data"]]
    assert values == sorted(values)


async def test_update_rejects_null_for_required_field(client, buying_list_payload):
    item = await create_item(client, buying_list_payload)

    response = await client.put(f"/api/buying-list/{item['id']}", json={"brand": None})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["path"] for d in error["details"]] == ["brand"]
    unchanged = await client.get(f"/api/buying-list/{item['id']}")
    assert unchanged.json()["data"]["brand"] == "Chanel"


async def test_update_can_clear_landed_cost_snapshot(client, buying_list_payload):
    item = await create_item(client, {**buying_list_payload, "landedCostSnapshot": {"customsEur": 120}})

    response = await client.put(f"/api/buying-list/{item['id']}", json={"landedCostSnapshot": None})

    assert response.status_code == 200
    assert response.json()["data"]["landedCostSnapshot"] is None
