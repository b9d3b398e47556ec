"""
Generic data access for one mapped entity.

Every repo is bound to a session and an organisation. Writes only flush;
the calling service owns commit and rollback so several repos can share a
single unit of work.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.enums import DEFAULT_ORG_ID
from luxselle.core.exceptions import NotFoundError, ValidationError
from luxselle.core.utils import utc_now

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def validation_details(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {"path": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


class BaseRepo(Generic[ModelT]):
    model: Type[ModelT]
    entity_name: str = "Record"
    create_schema: Optional[Type[BaseModel]] = None

    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID):
        self.db = db
        self.organisation_id = organisation_id

    def _scoped(self):
        return select(self.model).where(self.model.organisation_id == self.organisation_id)

    async def list(self) -> List[ModelT]:
        """All records for the organisation, newest first. Unpaginated."""
        result = await self.db.execute(self._scoped().order_by(self.model.created_at.desc()))
        return list(result.scalars().all())

    async def get_by_id(self, record_id: str) -> Optional[ModelT]:
        """Returns None when the record does not exist."""
        result = await self.db.execute(self._scoped().where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, record_id: str) -> ModelT:
        record = await self.get_by_id(record_id)
        if record is None:
            raise NotFoundError(self.entity_name, record_id)
        return record

    async def create(self, data: Union[BaseModel, Dict[str, Any]], actor: Optional[str] = None) -> ModelT:
        """
        Validate and persist a new record.

        Args:
            data: A create schema instance, or a raw dict validated against `create_schema`
            actor: Written to created_by / updated_by

        Raises:
            ValidationError: If a raw dict does not match the create schema
        """
        if isinstance(data, dict):
            if self.create_schema is None:
                values = dict(data)
            else:
                try:
                    values = self.create_schema.model_validate(data).model_dump()
                except PydanticValidationError as e:
                    raise ValidationError("Validation error", validation_details(e))
        else:
            values = data.model_dump()

        record = self.model(
            **values,
            organisation_id=self.organisation_id,
            created_by=actor,
            updated_by=actor,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def set(self, record_id: str, patch: Union[BaseModel, Dict[str, Any]], actor: Optional[str] = None) -> ModelT:
        """Merge only the fields present in `patch` into an existing record."""
        record = await self.get_or_404(record_id)
        values = patch.model_dump(exclude_unset=True) if isinstance(patch, BaseModel) else dict(patch)
        for key, value in values.items():
            setattr(record, key, value)
        record.updated_at = utc_now()
        if actor:
            record.updated_by = actor
        await self.db.flush()
        return record

    async def remove(self, record_id: str) -> None:
        """Unconditional delete; no existence check and no cascade."""
        await self.db.execute(
            delete(self.model).where(
                self.model.id == record_id,
                self.model.organisation_id == self.organisation_id,
            )
        )
