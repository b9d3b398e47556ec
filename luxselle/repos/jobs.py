from typing import List, Optional

from luxselle.models.system_job import SystemJob
from luxselle.repos.base import BaseRepo


class SystemJobRepo(BaseRepo[SystemJob]):
    model = SystemJob
    entity_name = "Job"

    async def filtered(
        self,
        job_type: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
    ) -> List[SystemJob]:
        query = self._scoped()
        if job_type:
            query = query.where(SystemJob.job_type == job_type)
        if status:
            query = query.where(SystemJob.status == status)
        result = await self.db.execute(query.order_by(SystemJob.created_at.desc()).limit(limit))
        return list(result.scalars().all())

    async def latest(self, job_type: str) -> Optional[SystemJob]:
        jobs = await self.filtered(job_type=job_type, limit=1)
        return jobs[0] if jobs else None
