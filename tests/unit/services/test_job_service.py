import pytest

from luxselle.core.enums import JobStatus
from luxselle.core.exceptions import JobStateError
from luxselle.models.system_job import SystemJob
from luxselle.services.job_service import JobRunner, JobService, record_job


async def make_job(db_session, status: str, job_type: str = "supplier_import", **fields) -> SystemJob:
    job = SystemJob(job_type=job_type, status=status, **fields)
    db_session.add(job)
    await db_session.commit()
    return job


async def test_record_job_sets_timing(db_session):
    job = await record_job(db_session, job_type="supplier_import", status=JobStatus.SUCCEEDED, progress={"total": 3})
    await db_session.commit()

    assert job.status == "succeeded"
    assert job.last_success_at is not None
    assert job.completed_at is not None
    assert job.progress == {"total": 3}


async def test_retry_failed_job(db_session):
    job = await make_job(db_session, "failed", last_error="boom")

    retried = await JobService(db_session).retry_job(job.id)

    assert retried.status == "queued"
    assert retried.retry_count == 1
    assert retried.last_error == ""


@pytest.mark.parametrize("status", ["queued", "running", "succeeded"])
async def test_only_failed_jobs_can_be_retried(db_session, status):
    job = await make_job(db_session, status)

    with pytest.raises(JobStateError):
        await JobService(db_session).retry_job(job.id)


async def test_retry_limit(db_session):
    job = await make_job(db_session, "failed", retry_count=3, max_retries=3)

    with pytest.raises(JobStateError) as exc_info:
        await JobService(db_session).retry_job(job.id)

    assert exc_info.value.details == {"retryCount": 3, "maxRetries": 3}


@pytest.mark.parametrize("status", ["queued", "running"])
async def test_cancel_active_job(db_session, status):
    job = await make_job(db_session, status)

    cancelled = await JobService(db_session).cancel_job(job.id)

    assert cancelled.status == "failed"
    assert cancelled.last_error == "Cancelled by user"


@pytest.mark.parametrize("status", ["succeeded", "failed"])
async def test_cancel_finished_job_is_rejected(db_session, status):
    job = await make_job(db_session, status)

    with pytest.raises(JobStateError):
        await JobService(db_session).cancel_job(job.id)


async def test_runner_fails_supplier_import_reexecution(db_session, session_factory):
    job = await make_job(db_session, "queued")

    await JobRunner(session_factory).run_job(job.id)

    await db_session.refresh(job)
    assert job.status == "failed"
    assert job.started_at is not None
    assert "requires the original file upload" in job.last_error


async def test_runner_ignores_jobs_that_are_not_queued(db_session, session_factory):
    job = await make_job(db_session, "succeeded", job_type="nightly_digest")

    await JobRunner(session_factory).run_job(job.id)

    await db_session.refresh(job)
    assert job.status == "succeeded"
