"""Domain value objects.

`StudentRecord` is the canonical in-memory representation of a stored
student. It embeds an `AuditInfo` value for its timestamps instead of
inheriting them from a base entity. Records are frozen: the merge
engine produces new records instead of mutating existing ones.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class AuditInfo(BaseModel):
    """Creation and last-modification timestamps (timezone aware, UTC)."""
    model_config = ConfigDict(frozen=True)

    created_at: datetime
    updated_at: datetime


class StudentRecord(BaseModel):
    """A stored student.

    `id` is assigned by the repository on insert and never changes.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    first_name: str
    last_name: str
    email: str
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    audit: AuditInfo


# Client-settable fields, in the order they are merged and mapped.
MUTABLE_FIELDS = ("first_name", "last_name", "email", "dob", "gender")


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime.

    SQLite drops tzinfo on the way back out, so naive values read from
    the database are taken to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_today() -> date:
    """The calendar date used for "in the past" checks and ages.

    Matches the local clock pydantic's `PastDate` validates against.
    """
    return date.today()
