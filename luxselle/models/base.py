# luxselle/models/base.py
from sqlalchemy import Column, DateTime, String

from luxselle.core.enums import DEFAULT_ORG_ID
from luxselle.core.utils import new_id, utc_now


class DocumentMixin:
    """
    Columns shared by every stored entity.

    Identities are opaque 32-char strings and every row carries the tenant
    partition key `organisation_id`.
    """

    id = Column(String(32), primary_key=True, default=new_id)
    organisation_id = Column(String(64), nullable=False, default=DEFAULT_ORG_ID, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
    created_by = Column(String(128), nullable=True)
    updated_by = Column(String(128), nullable=True)
