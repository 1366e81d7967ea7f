"""Snapshot records for members and the two relationship kinds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class Member:
    id: int
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    gender: Optional[Gender] = None
    picture_url: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Marriage:
    id: int
    spouse1_id: int
    spouse2_id: int
    marriage_date: Optional[date] = None
    divorce_date: Optional[date] = None
    created_at: Optional[datetime] = None

    def other_spouse(self, member_id: int) -> int:
        return self.spouse2_id if member_id == self.spouse1_id else self.spouse1_id

    @property
    def is_active(self) -> bool:
        return self.divorce_date is None


@dataclass(frozen=True)
class ParentChild:
    id: int
    parent_id: int
    child_id: int
    created_at: Optional[datetime] = None
