import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID
from luxselle.core.utils import models_to_schemas
from luxselle.repos.sourcing import SourcingRequestRepo
from luxselle.schemas.sourcing import (
    NextStatuses,
    SourcingRequestCreate,
    SourcingRequestRead,
    SourcingRequestUpdate,
)
from luxselle.services.activity_logger import ActivityLogger
from luxselle.services.sourcing_status import ensure_transition, valid_next_statuses

logger = logging.getLogger(__name__)


class SourcingService:
    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.actor = actor
        self.repo = SourcingRequestRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    async def list_requests(self, status: Optional[str] = None, priority: Optional[str] = None) -> List[SourcingRequestRead]:
        return models_to_schemas(await self.repo.filtered(status=status, priority=priority), SourcingRequestRead)

    async def get_request(self, request_id: str) -> SourcingRequestRead:
        return SourcingRequestRead.model_validate(await self.repo.get_or_404(request_id))

    async def create_request(self, data: SourcingRequestCreate) -> SourcingRequestRead:
        try:
            record = await self.repo.create(data, actor=self.actor)
            await self.activity.log_activity(
                ActivityEventType.SOURCING_CREATED,
                entity_type="sourcing_request",
                entity_id=record.id,
                payload={"customerName": record.customer_name, "budget": record.budget},
                actor=self.actor,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(record)
        return SourcingRequestRead.model_validate(record)

    async def update_request(self, request_id: str, patch: SourcingRequestUpdate) -> SourcingRequestRead:
        """
        Apply a patch. A status change is checked against the transition
        table before anything is written.
        """
        try:
            current = await self.repo.get_or_404(request_id)
            old_status = current.status
            new_status = patch.status if "status" in patch.model_fields_set else None
            if new_status is not None:
                ensure_transition(old_status, new_status)

            record = await self.repo.set(request_id, patch, actor=self.actor)

            if new_status is not None and new_status != old_status:
                await self.activity.log_activity(
                    ActivityEventType.SOURCING_STATUS_CHANGED,
                    entity_type="sourcing_request",
                    entity_id=request_id,
                    payload={"from": old_status, "to": new_status},
                    actor=self.actor,
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(record)
        return SourcingRequestRead.model_validate(record)

    async def next_statuses(self, request_id: str) -> NextStatuses:
        record = await self.repo.get_or_404(request_id)
        return NextStatuses(current=record.status, allowed=valid_next_statuses(record.status))

    async def delete_request(self, request_id: str) -> None:
        await self.repo.get_or_404(request_id)
        await self.repo.remove(request_id)
        await self.db.commit()
