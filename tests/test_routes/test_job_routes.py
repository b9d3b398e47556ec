import pytest

from luxselle.models.system_job import SystemJob


@pytest.fixture
async def failed_job(session_factory):
    async with session_factory() as session:
        job = SystemJob(job_type="price_refresh", status="failed", last_error="upstream timeout")
        session.add(job)
        await session.commit()
        return job


async def test_list_filters_by_type(client, failed_job):
    response = await client.get("/api/jobs", params={"type": "price_refresh"})
    assert [j["id"] for j in response.json()["data"]] == [failed_job.id]

    empty = await client.get("/api/jobs", params={"type": "supplier_import"})
    assert empty.json()["data"] == []


async def test_retry_queues_and_runs_in_background(client, failed_job):
    response = await client.post(f"/api/jobs/{failed_job.id}/retry")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "queued"
    assert response.json()["data"]["retryCount"] == 1

    job = (await client.get(f"/api/jobs/{failed_job.id}")).json()["data"]
    assert job["status"] == "failed"
    assert job["lastError"] == "Re-execution not supported for job type: price_refresh"


async def test_cancel_failed_job_is_rejected(client, failed_job):
    response = await client.post(f"/api/jobs/{failed_job.id}/cancel")

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"status": "failed"}


async def test_unknown_job(client):
    response = await client.get("/api/jobs/nope")

    assert response.status_code == 404
