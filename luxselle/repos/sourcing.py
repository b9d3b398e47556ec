from typing import List, Optional

from luxselle.models.sourcing_request import SourcingRequest
from luxselle.repos.base import BaseRepo
from luxselle.schemas.sourcing import SourcingRequestCreate


class SourcingRequestRepo(BaseRepo[SourcingRequest]):
    model = SourcingRequest
    entity_name = "Sourcing request"
    create_schema = SourcingRequestCreate

    async def filtered(self, status: Optional[str] = None, priority: Optional[str] = None) -> List[SourcingRequest]:
        query = self._scoped()
        if status:
            query = query.where(SourcingRequest.status == status)
        if priority:
            query = query.where(SourcingRequest.priority == priority)
        result = await self.db.execute(query.order_by(SourcingRequest.created_at.desc()))
        return list(result.scalars().all())
