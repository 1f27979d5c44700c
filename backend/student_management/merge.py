"""Partial-update merge engine.

`merge()` applies a `StudentUpdate` patch onto a `StudentRecord` using a
fixed per-field table. A field present in the patch's
`model_fields_set` overwrites the record value, even when the provided
value is empty; an absent field leaves the record value untouched.
`id` and `created_at` are never part of a patch and never change.

Every provided value is re-checked before anything is applied, so a
patch that bypassed request validation (for example one built with
`StudentUpdate.model_construct`) fails with `ValidationError` and
leaves no partially merged record behind.
"""

from datetime import date, datetime, timezone
from typing import Callable, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from .domain import MUTABLE_FIELDS, AuditInfo, Gender, StudentRecord, as_utc, local_today
from .errors import ValidationError
from .schemas import StudentUpdate


def _check_text(field: str, value, today: date):
    if value is None:
        raise ValidationError(field, "must not be null")
    if not isinstance(value, str):
        raise ValidationError(field, "must be text")
    return value


def _check_email(field: str, value, today: date):
    value = _check_text(field, value, today)
    # empty string is an explicit clear
    if value:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValidationError(field, f"invalid email: {exc}") from exc
    return value


def _check_dob(field: str, value, today: date):
    if value is None:
        return None
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError(field, "must be a calendar date")
    if value >= today:
        raise ValidationError(field, "must be in the past")
    return value


def _check_gender(field: str, value, today: date):
    if value is None or isinstance(value, Gender):
        return value
    try:
        return Gender(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(g.value for g in Gender)
        raise ValidationError(field, f"must be one of {allowed}") from None


FIELD_CHECKS: Dict[str, Callable] = {
    "first_name": _check_text,
    "last_name": _check_text,
    "email": _check_email,
    "dob": _check_dob,
    "gender": _check_gender,
}


def resolve_updates(patch: StudentUpdate, today: date) -> dict:
    """Return the checked values of every provided field in `patch`."""
    provided = patch.model_fields_set
    updates = {}
    for field in MUTABLE_FIELDS:
        if field in provided:
            updates[field] = FIELD_CHECKS[field](field, getattr(patch, field), today)
    return updates


def merge(record: StudentRecord, patch: StudentUpdate, now: Optional[datetime] = None,
          today: Optional[date] = None) -> StudentRecord:
    """Apply `patch` onto `record` and return the updated record.

    `updated_at` becomes `now` (current UTC time by default) but never
    moves backwards, so it stays >= both the previous `updated_at` and
    `created_at`. `dob` must fall before `today`, the local date by
    default, the same clock request validation and `compute_age` use.
    The input record is not modified.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    updates = resolve_updates(patch, today or local_today())
    updates["audit"] = AuditInfo(
        created_at=record.audit.created_at,
        updated_at=max(now, record.audit.updated_at),
    )
    return record.model_copy(update=updates)
