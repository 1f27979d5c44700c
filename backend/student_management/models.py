"""SQLModel data models.

This module defines the `students` table. Audit timestamps are plain
columns; they are assigned explicitly by the mapper and merge engine
rather than by ORM lifecycle hooks.
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Enum as SAEnum
from datetime import datetime, date

from .domain import Gender


class Student(SQLModel, table=True):
    """A student row.

    Fields:
    - `email`: unique across all students
    - `gender`: stored as the enum name (MALE/FEMALE/OTHER)
    - `created_at`: set once on insert, never updated
    - `updated_at`: set on insert and refreshed on every update
    """
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    email: str = Field(index=True, nullable=False, unique=True)
    dob: Optional[date] = None
    gender: Optional[Gender] = Field(default=None, sa_column=Column(SAEnum(Gender, name="gender"), nullable=True))
    created_at: datetime
    updated_at: datetime
