from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from student_management.domain import AuditInfo, Gender, StudentRecord
from student_management.projection import compute_age, project
from student_management.schemas import StudentCreate, StudentUpdate

STAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _record(dob):
    return StudentRecord(
        id=1, first_name="Ann", last_name="Lee", email="a@x.com", dob=dob, gender=Gender.FEMALE,
        audit=AuditInfo(created_at=STAMP, updated_at=STAMP),
    )


def test_age_from_dob_on_fixed_date():
    out = project(_record(date(2000, 1, 1)), today=date(2024, 6, 1))
    assert out.age == 24
    assert out.first_name == "Ann"
    assert out.gender is Gender.FEMALE


def test_age_counts_only_completed_years():
    assert compute_age(date(2000, 6, 2), today=date(2024, 6, 1)) == 23
    assert compute_age(date(2000, 6, 1), today=date(2024, 6, 1)) == 24


def test_leap_day_birthday():
    assert compute_age(date(2004, 2, 29), today=date(2023, 2, 28)) == 18
    assert compute_age(date(2004, 2, 29), today=date(2023, 3, 1)) == 19


def test_missing_or_future_dob_has_no_age():
    assert project(_record(None), today=date(2024, 6, 1)).age is None
    assert compute_age(date(2030, 1, 1), today=date(2024, 6, 1)) is None


def test_projection_hides_audit_fields():
    data = project(_record(date(2000, 1, 1))).model_dump()
    assert "audit" not in data
    assert "created_at" not in data
    assert "updated_at" not in data


def test_update_tracks_provided_fields():
    patch = StudentUpdate.model_validate({"email": "", "dob": None})
    assert patch.model_fields_set == {"email", "dob"}
    assert StudentUpdate().model_fields_set == set()


@pytest.mark.parametrize("body", [{"id": 3}, {"created_at": "2024-01-01T00:00:00Z"}, {"updated_at": "2024-01-01T00:00:00Z"}])
def test_update_rejects_server_managed_fields(body):
    with pytest.raises(PydanticValidationError):
        StudentUpdate.model_validate(body)


@pytest.mark.parametrize("body", [{"first_name": None}, {"email": None}, {"email": "nope"}, {"dob": "2999-01-01"}, {"gender": "robot"}])
def test_update_rejects_invalid_values(body):
    with pytest.raises(PydanticValidationError):
        StudentUpdate.model_validate(body)


def test_gender_is_case_insensitive():
    assert StudentUpdate(gender=" female ").gender is Gender.FEMALE
    assert StudentCreate(first_name="A", last_name="B", email="a@x.com", gender="other").gender is Gender.OTHER


def test_create_requires_names_and_email():
    with pytest.raises(PydanticValidationError):
        StudentCreate(first_name="  ", last_name="Lee", email="a@x.com")
    with pytest.raises(PydanticValidationError):
        StudentCreate.model_validate({"first_name": "Ann", "last_name": "Lee"})
