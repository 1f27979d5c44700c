"""Render stored records into the API's read-only output shape."""

from datetime import date
from typing import Optional

from .domain import StudentRecord, local_today
from .schemas import StudentOut


def compute_age(dob: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole years between `dob` and `today`.

    Returns None when `dob` is missing or lies in the future.
    """
    if dob is None:
        return None
    today = today or local_today()
    if dob > today:
        return None
    before_birthday = (today.month, today.day) < (dob.month, dob.day)
    return today.year - dob.year - int(before_birthday)


def project(record: StudentRecord, today: Optional[date] = None) -> StudentOut:
    """Build a `StudentOut` for `record`; audit timestamps are not exposed."""
    return StudentOut(
        id=record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        email=record.email,
        dob=record.dob,
        gender=record.gender,
        age=compute_age(record.dob, today),
    )
