# luxselle/schemas/base.py
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """
    Base for every API schema.

    Field names are snake_case in Python and camelCase on the wire; both are
    accepted on input.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=True,
    )


class DocumentRead(ApiModel):
    """Fields present on every stored record."""
    id: str
    organisation_id: str
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class DataResponse(ApiModel, Generic[T]):
    data: T


class ListResponse(ApiModel, Generic[T]):
    data: List[T]


class PageResponse(ApiModel, Generic[T]):
    data: List[T]
    next_cursor: Optional[str] = None
    total: int = 0


def reject_null(value):
    """Patch fields may be omitted but not cleared with an explicit null."""
    if value is None:
        raise ValueError("may not be null")
    return value
