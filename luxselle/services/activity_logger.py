# luxselle/services/activity_logger.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID
from luxselle.models.activity_event import ActivityEvent

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Service for recording activity events throughout the application.

    Events are added to the caller's session and flushed, never committed,
    so they share the fate of the unit of work they describe.
    """

    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID):
        self.db = db
        self.organisation_id = organisation_id

    async def log_activity(
        self,
        event_type: ActivityEventType,
        entity_type: str,
        entity_id: str,
        payload: Optional[Dict[str, Any]] = None,
        actor: str = "system",
    ) -> ActivityEvent:
        """
        Record an activity event.

        Args:
            event_type: What happened (buylist_received, supplier_import, ...)
            entity_type: The type of entity affected (buying_list_item, supplier, ...)
            entity_id: The ID of the affected entity
            payload: Optional additional details as a dictionary
            actor: Who performed the action

        Returns:
            The created ActivityEvent instance
        """
        event = ActivityEvent(
            organisation_id=self.organisation_id,
            actor=actor,
            event_type=ActivityEventType(event_type).value,
            entity_type=entity_type,
            entity_id=str(entity_id),
            payload=payload or {},
            created_by=actor,
            updated_by=actor,
        )
        self.db.add(event)
        await self.db.flush()

        logger.debug(f"Activity logged: {event.event_type} {entity_type} {entity_id}")
        return event
