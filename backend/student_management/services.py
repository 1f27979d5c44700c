"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate the repository,
the mapper and the merge engine. Services are intentionally thin: they
load rows, run domain logic on `StudentRecord` values and persist the
result via the repository. Errors from `errors` propagate unchanged.
"""

import csv
import io
import json
import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from . import mapper, models, repositories
from .domain import StudentRecord
from .errors import DuplicateEmailError, NotFoundError
from .merge import merge
from .schemas import StudentCreate, StudentUpdate

logger = logging.getLogger("student_management.services")


def _log_event(event: str, **fields) -> None:
    logger.info("%s %s", event, json.dumps(fields, ensure_ascii=True, default=str))


class StudentService:
    """Create, read, update and delete students."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.StudentRepository(session)

    def create(self, payload: StudentCreate, now: Optional[datetime] = None) -> StudentRecord:
        """Persist a new student and return its record.

        Raises `DuplicateEmailError` when the email is already taken.
        """
        self._ensure_email_free(payload.email)
        student = self.repo.create(mapper.new_student(payload, now=now))
        _log_event("student_created", student_id=student.id)
        return mapper.to_record(student)

    def get(self, student_id: int) -> StudentRecord:
        """Return the record for `student_id` or raise `NotFoundError`."""
        return mapper.to_record(self._load(student_id))

    def list(self) -> List[StudentRecord]:
        """Return all students ordered by id."""
        return [mapper.to_record(s) for s in self.repo.list_all()]

    def update(self, student_id: int, patch: StudentUpdate, now: Optional[datetime] = None) -> StudentRecord:
        """Apply a partial update and persist the merged record.

        The row is only modified after `merge` has resolved every
        provided field, so a `ValidationError` leaves it untouched.
        """
        student = self._load(student_id)
        current = mapper.to_record(student)
        merged = merge(current, patch, now=now)
        if merged.email != current.email:
            self._ensure_email_free(merged.email, exclude_id=student_id)
        saved = self.repo.save(mapper.apply_record(student, merged))
        _log_event(
            "student_updated",
            student_id=student_id,
            fields=sorted(patch.model_fields_set),
        )
        return mapper.to_record(saved)

    def delete(self, student_id: int) -> None:
        """Delete the student or raise `NotFoundError`."""
        self.repo.delete(self._load(student_id))
        _log_event("student_deleted", student_id=student_id)

    def _load(self, student_id: int) -> models.Student:
        student = self.repo.get(student_id)
        if student is None:
            raise NotFoundError(student_id)
        return student

    def _ensure_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = self.repo.get_by_email(email)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateEmailError(email)


def parse_student_rows(file_bytes: bytes, filename: str) -> List[dict]:
    """Parse a `.json` list of objects or a `.csv` file with a header row.

    Empty CSV cells are read as missing values. Raises `ValueError` for
    unsupported file types or malformed content.
    """
    name = filename.lower()
    text = file_bytes.decode("utf-8-sig")
    if name.endswith(".json"):
        try:
            data = json.loads(text) if text.strip() else []
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise ValueError("JSON import must be a list of student objects")
        return data
    if name.endswith(".csv"):
        reader = csv.DictReader(io.StringIO(text))
        return [{k: v for k, v in row.items() if k and v not in (None, "")} for row in reader]
    raise ValueError("unsupported file type; expected .json or .csv")


def _format_errors(exc: PydanticValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())


class StudentImportService:
    """Bulk-create students from uploaded files."""
    def __init__(self, session: Session):
        self.students = StudentService(session)

    def import_file(self, file_bytes: bytes, filename: str, dry_run: bool = False):
        """Create one student per valid row of `filename`.

        Returns a dictionary with the number of `created` and `skipped`
        rows and the validation `errors` encountered per row. Rows whose
        email already exists (in the database or earlier in the same
        file) are skipped. With `dry_run` nothing is written and
        `created` counts the rows that would have been created.
        """
        rows = parse_student_rows(file_bytes, filename)
        created = 0
        skipped = 0
        errors = []
        seen = set()
        for idx, row in enumerate(rows):
            if not isinstance(row, dict):
                errors.append({'index': idx, 'error': 'student item must be an object', 'item': row})
                continue
            try:
                payload = StudentCreate.model_validate(row)
            except PydanticValidationError as e:
                errors.append({'index': idx, 'error': _format_errors(e), 'item': row})
                continue
            if payload.email in seen or self.students.repo.get_by_email(payload.email):
                skipped += 1
                continue
            seen.add(payload.email)
            if not dry_run:
                self.students.create(payload)
            created += 1
        _log_event("students_imported", filename=filename, created=created, skipped=skipped,
                   errors=len(errors), dry_run=dry_run)
        return {'created': created, 'skipped': skipped, 'errors': errors}
