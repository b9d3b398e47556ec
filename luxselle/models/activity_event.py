# luxselle/models/activity_event.py
from sqlalchemy import Column, String, JSON

from luxselle.database import Base
from luxselle.models.base import DocumentMixin


class ActivityEvent(DocumentMixin, Base):
    """
    Append-only audit record for every significant state change.

    This includes:
    - Buying list additions and receipts
    - Product creation and sales
    - Sourcing request creation and status changes
    - Supplier imports and job retries/cancellations
    """
    __tablename__ = "activity_events"

    actor = Column(String(128), nullable=False, default="system")
    event_type = Column(String(64), nullable=False, index=True)
    entity_type = Column(String(64), nullable=False, index=True)
    entity_id = Column(String(64), nullable=False, index=True)

    # Additional details in JSON format
    payload = Column(JSON, nullable=False, default=dict)

    def __repr__(self):
        return f"<ActivityEvent {self.event_type} {self.entity_type} {self.entity_id}>"
