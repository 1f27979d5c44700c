from pathlib import Path
import os
import tempfile
import pytest

# Point the app at a throwaway SQLite file before `student_management` is imported.
_DB_DIR = Path(tempfile.mkdtemp(prefix="students-test-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["ENV"] = "dev"


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test an empty `students` table."""
    from sqlmodel import SQLModel
    from student_management.database import engine, create_db_and_tables
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    from sqlmodel import Session
    from student_management.database import engine
    with Session(engine) as s:
        yield s
