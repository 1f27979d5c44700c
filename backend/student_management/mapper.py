"""Conversions between table rows, domain records and request schemas."""

from datetime import datetime, timezone
from typing import Optional

from . import models
from .domain import MUTABLE_FIELDS, AuditInfo, StudentRecord, as_utc
from .schemas import StudentCreate


def to_record(student: models.Student) -> StudentRecord:
    """Build a `StudentRecord` from a persisted `Student` row."""
    if student.id is None:
        raise ValueError("student row has not been persisted yet")
    return StudentRecord(
        id=student.id,
        first_name=student.first_name,
        last_name=student.last_name,
        email=student.email,
        dob=student.dob,
        gender=student.gender,
        audit=AuditInfo(
            created_at=as_utc(student.created_at),
            updated_at=as_utc(student.updated_at),
        ),
    )


def new_student(payload: StudentCreate, now: Optional[datetime] = None) -> models.Student:
    """Create an unsaved `Student` row with both audit timestamps set to `now`."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    return models.Student(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        dob=payload.dob,
        gender=payload.gender,
        created_at=now,
        updated_at=now,
    )


def apply_record(student: models.Student, record: StudentRecord) -> models.Student:
    """Copy the mutable fields and `updated_at` of `record` onto `student`.

    `id` and `created_at` are left as stored.
    """
    for field in MUTABLE_FIELDS:
        setattr(student, field, getattr(record, field))
    student.updated_at = record.audit.updated_at
    return student
