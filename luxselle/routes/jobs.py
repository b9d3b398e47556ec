from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import JobStatus
from luxselle.dependencies import get_db, get_session_factory
from luxselle.schemas.base import DataResponse, ListResponse
from luxselle.schemas.job import SystemJobRead
from luxselle.services.job_service import JobRunner, JobService

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=ListResponse[SystemJobRead])
async def list_jobs(
    type: Optional[str] = None,
    status: Optional[JobStatus] = None,
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    jobs = await JobService(db).list_jobs(job_type=type, status=status.value if status else None, limit=limit)
    return {"data": jobs}


@router.get("/{job_id}", response_model=DataResponse[SystemJobRead])
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await JobService(db).get_job(job_id)}


@router.post("/{job_id}/retry", response_model=DataResponse[SystemJobRead])
async def retry_job(
    job_id: str,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    session_factory=Depends(get_session_factory),
):
    job = await JobService(db).retry_job(job_id)
    background_tasks.add_task(JobRunner(session_factory).run_job, job_id)
    return {"data": job}


@router.post("/{job_id}/cancel", response_model=DataResponse[SystemJobRead])
async def cancel_job(job_id: str, db: AsyncSession = Depends(get_db)):
    return {"data": await JobService(db).cancel_job(job_id)}
