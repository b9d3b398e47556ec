import pytest

SOURCING_PAYLOAD = {
    "customerName": "Aoife Byrne",
    "queryText": "Hermes Kelly 25 in Etoupe",
    "brand": "Hermes",
    "budget": 15000,
    "priority": "high",
}


@pytest.fixture
async def sourcing_request(client):
    response = await client.post("/api/sourcing", json=SOURCING_PAYLOAD)
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_defaults_to_open(sourcing_request):
    assert sourcing_request["status"] == "open"
    assert sourcing_request["priority"] == "high"


async def test_walks_the_happy_path(client, sourcing_request):
    for status in ("sourcing", "sourced", "fulfilled"):
        response = await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"status": status})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status


async def test_rejects_skipping_a_step(client, sourcing_request):
    response = await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"status": "fulfilled"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_REQUEST"
    assert error["details"] == {"from": "open", "to": "fulfilled"}

    unchanged = await client.get(f"/api/sourcing/{sourcing_request['id']}")
    assert unchanged.json()["data"]["status"] == "open"


async def test_same_status_update_is_allowed(client, sourcing_request):
    response = await client.put(
        f"/api/sourcing/{sourcing_request['id']}", json={"status": "open", "notes": "Called back"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["notes"] == "Called back"


async def test_next_statuses(client, sourcing_request):
    response = await client.get(f"/api/sourcing/{sourcing_request['id']}/next-statuses")

    assert response.status_code == 200
    assert response.json()["data"] == {"current": "open", "allowed": ["sourcing"]}


async def test_status_change_is_logged(client, sourcing_request):
    await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"status": "sourcing"})

    activity = await client.get("/api/dashboard/activity")
    changes = [e for e in activity.json()["data"] if e["eventType"] == "sourcing_status_changed"]
    assert len(changes) == 1
    assert changes[0]["payload"] == {"from": "open", "to": "sourcing"}


async def test_filter_by_status(client, sourcing_request):
    other = await client.post("/api/sourcing", json={**SOURCING_PAYLOAD, "customerName": "Niamh"})
    await client.put(f"/api/sourcing/{other.json()['data']['id']}", json={"status": "sourcing"})

    response = await client.get("/api/sourcing", params={"status": "open"})

    assert [r["id"] for r in response.json()["data"]] == [sourcing_request["id"]]


async def test_null_status_is_a_validation_error(client, sourcing_request):
    response = await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"status": None})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["path"] for d in error["details"]] == ["status"]
    unchanged = await client.get(f"/api/sourcing/{sourcing_request['id']}")
    assert unchanged.json()["data"]["status"] == "open"


async def test_linked_product_can_be_cleared(client, sourcing_request):
    linked = await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"linkedProductId": "prod-1"})
    assert linked.json()["data"]["linkedProductId"] == "prod-1"

    response = await client.put(f"/api/sourcing/{sourcing_request['id']}", json={"linkedProductId": None})

    assert response.status_code == 200
    assert response.json()["data"]["linkedProductId"] is None
