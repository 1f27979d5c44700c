from datetime import date, datetime, timedelta, timezone

import pytest

from student_management import services
from student_management.errors import DuplicateEmailError, NotFoundError, ValidationError
from student_management.repositories import StudentRepository
from student_management.schemas import StudentCreate, StudentUpdate

CREATED = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _payload(**overrides):
    data = {'first_name': 'Ann', 'last_name': 'Lee', 'email': 'ann@x.com', 'dob': date(2000, 1, 1), 'gender': 'FEMALE'}
    data.update(overrides)
    return StudentCreate(**data)


def test_create_sets_both_timestamps(session):
    record = services.StudentService(session).create(_payload(), now=CREATED)
    assert record.id is not None
    assert record.audit.created_at == CREATED
    assert record.audit.updated_at == CREATED


def test_update_refreshes_updated_at_and_keeps_created_at(session):
    svc = services.StudentService(session)
    record = svc.create(_payload(), now=CREATED)
    later = CREATED + timedelta(hours=2)
    updated = svc.update(record.id, StudentUpdate(first_name='Anna'), now=later)
    assert updated.first_name == 'Anna'
    assert updated.audit.created_at == CREATED
    assert updated.audit.updated_at == later
    reloaded = svc.get(record.id)
    assert reloaded == updated


def test_rejected_update_writes_nothing(session):
    svc = services.StudentService(session)
    record = svc.create(_payload(), now=CREATED)
    patch = StudentUpdate.model_construct(last_name='Kim', email='broken')
    with pytest.raises(ValidationError) as exc:
        svc.update(record.id, patch)
    assert exc.value.field == 'email'
    assert svc.get(record.id) == record


def test_update_and_delete_unknown_student(session):
    svc = services.StudentService(session)
    with pytest.raises(NotFoundError):
        svc.update(42, StudentUpdate(last_name='Kim'))
    with pytest.raises(NotFoundError):
        svc.delete(42)


def test_duplicate_email_on_create_and_update(session):
    svc = services.StudentService(session)
    svc.create(_payload())
    other = svc.create(_payload(email='bo@x.com'))
    with pytest.raises(DuplicateEmailError):
        svc.create(_payload(first_name='Cy'))
    with pytest.raises(DuplicateEmailError):
        svc.update(other.id, StudentUpdate(email='ann@x.com'))


def test_repository_maps_unique_violation(session):
    svc = services.StudentService(session)
    first = svc.create(_payload())
    repo = StudentRepository(session)
    from student_management import mapper
    clash = mapper.new_student(_payload(first_name='Cy'))
    with pytest.raises(DuplicateEmailError):
        repo.create(clash)
    assert [s.id for s in repo.list_all()] == [first.id]


def test_import_csv_skips_duplicates_and_reports_errors(session):
    services.StudentService(session).create(_payload())
    csv_bytes = (
        b'first_name,last_name,email,dob,gender\n'
        b'Bo,Kim,bo@x.com,1999-05-05,male\n'
        b'Ann,Lee,ann@x.com,,\n'
        b'Cy,Park,not-an-email,,\n'
        b'Di,Ng,bo@x.com,,\n'
    )
    result = services.StudentImportService(session).import_file(csv_bytes, 'students.csv')
    assert result['created'] == 1
    assert result['skipped'] == 2
    assert [e['index'] for e in result['errors']] == [2]
    assert 'email' in result['errors'][0]['error']
    bo = StudentRepository(session).get_by_email('bo@x.com')
    assert bo is not None and bo.dob == date(1999, 5, 5)


def test_import_dry_run_writes_nothing(session):
    data = b'[{"first_name": "Bo", "last_name": "Kim", "email": "bo@x.com"}, "oops"]'
    result = services.StudentImportService(session).import_file(data, 'students.json', dry_run=True)
    assert result['created'] == 1
    assert result['errors'][0]['index'] == 1
    assert StudentRepository(session).list_all() == []


def test_parse_rejects_non_list_json_and_unknown_types():
    with pytest.raises(ValueError):
        services.parse_student_rows(b'{"first_name": "Ann"}', 'students.json')
    with pytest.raises(ValueError):
        services.parse_student_rows(b'Ann', 'students.xlsx')
    assert services.parse_student_rows(b'', 'students.json') == []
