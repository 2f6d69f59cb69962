# storefront/models/record.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


def clamp_non_negative(value: float | int) -> float | int:
    """Numeric fields are never stored below zero; negatives become 0."""
    return value if value >= 0 else type(value)(0)


class Record(SQLModel):
    """
    Common shape of every persisted entity.

    - id: decimal counter scoped to the entity's JSON file ("1", "2", ...)
    - created_at: stamped once by the store
    - updated_at: refreshed by the store on every mutation

    All string fields are stripped on validation, so every write path
    through a store trims them.
    """

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    id: str
    created_at: datetime
    updated_at: datetime
