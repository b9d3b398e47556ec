"""
Utility functions for the application.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Document-style identity: 32 hex chars."""
    return uuid.uuid4().hex


def model_to_schema(db_model: Any, schema_class: Type[T]) -> T:
    """
    Convert a SQLAlchemy model instance to a Pydantic schema instance.

    Args:
        db_model: SQLAlchemy model instance
        schema_class: Pydantic schema class

    Returns:
        Instance of the Pydantic schema
    """
    return schema_class.model_validate(db_model, from_attributes=True)


def models_to_schemas(db_models: List[Any], schema_class: Type[T]) -> List[T]:
    return [model_to_schema(model, schema_class) for model in db_models]


def round_money(value: float) -> float:
    """Round a currency amount to 2 decimal places (half up)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
