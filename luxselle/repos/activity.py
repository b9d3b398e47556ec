from typing import List

from luxselle.models.activity_event import ActivityEvent
from luxselle.repos.base import BaseRepo


class ActivityEventRepo(BaseRepo[ActivityEvent]):
    model = ActivityEvent
    entity_name = "Activity event"

    async def recent(self, limit: int = 20) -> List[ActivityEvent]:
        result = await self.db.execute(
            self._scoped().order_by(ActivityEvent.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def for_entity(self, entity_type: str, entity_id: str) -> List[ActivityEvent]:
        result = await self.db.execute(
            self._scoped()
            .where(ActivityEvent.entity_type == entity_type, ActivityEvent.entity_id == entity_id)
            .order_by(ActivityEvent.created_at.desc())
        )
        return list(result.scalars().all())
