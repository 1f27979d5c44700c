"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. `StudentUpdate` is the partial-update
patch: a field is *provided* when it appears in `model_fields_set`
(even with an empty or null value) and *absent* otherwise.
"""

from datetime import date
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PastDate, field_validator

from .domain import Gender


def _normalize_gender(value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


class StudentCreate(BaseModel):
    """Payload for creating a student."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    dob: Optional[PastDate] = None
    gender: Optional[Gender] = None

    normalize_gender = field_validator("gender", mode="before")(_normalize_gender)


class StudentUpdate(BaseModel):
    """Partial update for a student; omitted fields are left untouched.

    `id`, `created_at` and `updated_at` are not client-settable and are
    rejected as extra fields.
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[Union[EmailStr, Literal[""]]] = None
    dob: Optional[PastDate] = None
    gender: Optional[Gender] = None

    normalize_gender = field_validator("gender", mode="before")(_normalize_gender)

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def reject_null(cls, value):
        # NOT NULL columns: clearing uses "" instead
        if value is None:
            raise ValueError("may be cleared with an empty string but not set to null")
        return value


class StudentOut(BaseModel):
    """Read-only view of a student with the derived `age`."""
    id: int
    first_name: str
    last_name: str
    email: str
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    age: Optional[int] = None
