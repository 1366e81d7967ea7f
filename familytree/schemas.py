"""Request bodies for the create/update routes.

Validation here is the only place domain constraints are checked; the core
modules assume they hold.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

try:
    from .models import Gender
except ImportError:  # pragma: no cover
    from models import Gender


def _check_date_order(start: date | None, end: date | None, message: str) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError(message)


class MemberCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    gender: Optional[Gender] = None
    picture_url: Optional[str] = None

    @model_validator(mode="after")
    def _death_after_birth(self) -> "MemberCreate":
        _check_date_order(self.birth_date, self.death_date, "death_date must not precede birth_date")
        return self


class MemberUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    gender: Optional[Gender] = None
    picture_url: Optional[str] = None

    @model_validator(mode="after")
    def _names_not_null(self) -> "MemberUpdate":
        for name in ("first_name", "last_name"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class MarriageCreate(BaseModel):
    spouse1_id: int = Field(gt=0)
    spouse2_id: int = Field(gt=0)
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None

    @model_validator(mode="after")
    def _check(self) -> "MarriageCreate":
        if self.spouse1_id == self.spouse2_id:
            raise ValueError("a person cannot marry themselves")
        _check_date_order(self.marriage_date, self.divorce_date, "divorce_date must not precede marriage_date")
        return self

    def normalized_pair(self) -> tuple[int, int]:
        return min(self.spouse1_id, self.spouse2_id), max(self.spouse1_id, self.spouse2_id)


class MarriageUpdate(BaseModel):
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None

    @model_validator(mode="after")
    def _check(self) -> "MarriageUpdate":
        _check_date_order(self.marriage_date, self.divorce_date, "divorce_date must not precede marriage_date")
        return self


class ParentChildCreate(BaseModel):
    parent_id: int = Field(gt=0)
    child_id: int = Field(gt=0)

    @model_validator(mode="after")
    def _check(self) -> "ParentChildCreate":
        if self.parent_id == self.child_id:
            raise ValueError("a person cannot be their own parent")
        return self
