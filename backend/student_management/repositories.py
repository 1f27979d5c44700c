"""Repository classes encapsulating database operations.

`StudentRepository` is the storage collaborator for the service layer.
It returns SQLModel `Student` rows and performs commits/refreshes where
appropriate. Unique-constraint violations on `email` are rolled back
and raised as `DuplicateEmailError`.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from . import models
from .errors import DuplicateEmailError


class StudentRepository:
    """CRUD operations for `Student` rows."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, student: models.Student) -> models.Student:
        """Persist a new student and return the managed instance with its id."""
        return self.save(student)

    def save(self, student: models.Student) -> models.Student:
        """Insert or update `student`, commit, and refresh it."""
        # read before commit: a rollback expires the instance
        email = student.email
        self.session.add(student)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError(email) from exc
        self.session.refresh(student)
        return student

    def get(self, student_id: int) -> Optional[models.Student]:
        """Get a `Student` by primary key or `None` if not found."""
        return self.session.get(models.Student, student_id)

    def get_by_email(self, email: str) -> Optional[models.Student]:
        """Return a `Student` by email or `None` if not found."""
        stmt = select(models.Student).where(models.Student.email == email)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.Student]:
        """Return every student ordered by id."""
        stmt = select(models.Student).order_by(models.Student.id)
        return list(self.session.exec(stmt).all())

    def delete(self, student: models.Student) -> None:
        """Remove `student` and commit."""
        self.session.delete(student)
        self.session.commit()
