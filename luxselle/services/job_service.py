"""Helpers for recording, retrying and cancelling system jobs."""

import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID, JobStatus
from luxselle.core.exceptions import JobStateError
from luxselle.core.utils import models_to_schemas, utc_now
from luxselle.models.system_job import SystemJob
from luxselle.repos.jobs import SystemJobRepo
from luxselle.schemas.job import SystemJobRead
from luxselle.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3


async def record_job(
    db: AsyncSession,
    *,
    job_type: str,
    status: JobStatus,
    progress: Optional[Dict[str, Any]] = None,
    last_error: str = "",
    error_count: int = 0,
    input: Optional[Dict[str, Any]] = None,
    output: Optional[Dict[str, Any]] = None,
    organisation_id: str = DEFAULT_ORG_ID,
) -> SystemJob:
    """Record the outcome of a batch run that has already completed."""
    now = utc_now()
    job = SystemJob(
        organisation_id=organisation_id,
        job_type=job_type,
        status=status.value,
        queued_at=now,
        started_at=now,
        completed_at=now,
        last_run_at=now,
        last_success_at=now if status == JobStatus.SUCCEEDED else None,
        last_error=last_error,
        progress=progress,
        error_count=error_count,
        retry_count=0,
        max_retries=DEFAULT_MAX_RETRIES,
        input=input,
        output=output,
    )
    db.add(job)
    await db.flush()
    return job


class JobService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.actor = actor
        self.repo = SystemJobRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    async def list_jobs(
        self,
        job_type: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> List[SystemJobRead]:
        jobs = await self.repo.filtered(job_type=job_type, status=status, limit=limit)
        return models_to_schemas(jobs, SystemJobRead)

    async def get_job(self, job_id: str) -> SystemJobRead:
        return SystemJobRead.model_validate(await self.repo.get_or_404(job_id))

    async def retry_job(self, job_id: str) -> SystemJobRead:
        """
        Re-queue a failed job.

        Raises:
            NotFoundError: Unknown job
            JobStateError: The job is not failed, or has used all its retries
        """
        job = await self.repo.get_or_404(job_id)
        if job.status != JobStatus.FAILED.value:
            raise JobStateError("Only failed jobs can be retried", {"status": job.status})
        max_retries = job.max_retries or DEFAULT_MAX_RETRIES
        if job.retry_count >= max_retries:
            raise JobStateError(
                "Max retries exceeded",
                {"retryCount": job.retry_count, "maxRetries": max_retries},
            )

        now = utc_now()
        job.status = JobStatus.QUEUED.value
        job.queued_at = now
        job.retry_count = (job.retry_count or 0) + 1
        job.last_error = ""
        job.progress = None
        job.updated_at = now
        job.updated_by = self.actor
        await self.activity.log_activity(
            ActivityEventType.JOB_RETRIED,
            entity_type="system_job",
            entity_id=job.id,
            payload={"jobType": job.job_type, "retryCount": job.retry_count},
            actor=self.actor,
        )
        await self.db.commit()
        await self.db.refresh(job)
        logger.info(f"Job {job_id} re-queued (retry {job.retry_count}/{max_retries})")
        return SystemJobRead.model_validate(job)

    async def cancel_job(self, job_id: str) -> SystemJobRead:
        job = await self.repo.get_or_404(job_id)
        if job.status not in (JobStatus.QUEUED.value, JobStatus.RUNNING.value):
            raise JobStateError("Only queued or running jobs can be cancelled", {"status": job.status})

        now = utc_now()
        job.status = JobStatus.FAILED.value
        job.completed_at = now
        job.last_error = "Cancelled by user"
        job.updated_at = now
        job.updated_by = self.actor
        await self.activity.log_activity(
            ActivityEventType.JOB_CANCELLED,
            entity_type="system_job",
            entity_id=job.id,
            payload={"jobType": job.job_type},
            actor=self.actor,
        )
        await self.db.commit()
        await self.db.refresh(job)
        logger.info(f"Job {job_id} cancelled")
        return SystemJobRead.model_validate(job)


class JobRunner:
    """
    Executes queued jobs in-process after the HTTP response has been sent.

    Each run opens its own session from `session_factory`. Job types that
    cannot be re-executed (supplier_import needs the original upload) are
    marked failed with an explanatory error.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def run_job(self, job_id: str) -> None:
        async with self.session_factory() as db:
            job = await db.get(SystemJob, job_id)
            if job is None or job.status != JobStatus.QUEUED.value:
                return

            now = utc_now()
            job.status = JobStatus.RUNNING.value
            job.started_at = now
            job.last_run_at = now
            await db.commit()

            if job.job_type == "supplier_import":
                reason = (
                    "Re-execution not supported: supplier_import requires the original file upload. "
                    "Re-run the import from the supplier page."
                )
            else:
                reason = f"Re-execution not supported for job type: {job.job_type}"

            job.status = JobStatus.FAILED.value
            job.completed_at = utc_now()
            job.last_error = reason
            job.updated_at = job.completed_at
            await db.commit()
            logger.warning(f"Job {job_id} could not be re-executed: {reason}")
