"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the Student Management
backend. Controllers are intentionally thin: they accept requests,
delegate to services, project records into `StudentOut` and return
JSON responses.

Endpoints implemented:
- GET /health
- POST /students
- GET /students
- GET /students/{student_id}
- PATCH /students/{student_id}
- DELETE /students/{student_id}
- POST /students/import
"""

from fastapi import FastAPI, Depends, UploadFile, File, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlmodel import Session
from typing import List
import json
import logging
import time
import uuid
from .config import settings
from .database import create_db_and_tables, get_session
from . import services
from .errors import DuplicateEmailError, NotFoundError, ValidationError
from .projection import project
from .schemas import StudentCreate, StudentOut, StudentUpdate

app = FastAPI(title="Student Management API")
logger = logging.getLogger("student_management.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps local HTML testers working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/students"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


def _validation_detail(e: ValidationError) -> dict:
    return {"field": e.field, "reason": e.reason}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post('/students', response_model=StudentOut, status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_session)):
    """Create a student and return its projection."""
    svc = services.StudentService(db)
    try:
        record = svc.create(payload)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return project(record)


@app.get('/students', response_model=List[StudentOut])
def list_students(db: Session = Depends(get_session)):
    """Return all students ordered by id."""
    return [project(r) for r in services.StudentService(db).list()]


@app.post('/students/import')
def import_students(file: UploadFile = File(...), dry_run: bool = False, db: Session = Depends(get_session)):
    """Bulk-create students from a `.json` or `.csv` upload.

    Returns `{'created', 'skipped', 'errors'}`; rows with an email that
    already exists are skipped and invalid rows are reported by index.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail='no file')
    contents = file.file.read(settings.MAX_IMPORT_BYTES + 1)
    if len(contents) > settings.MAX_IMPORT_BYTES:
        raise HTTPException(status_code=400, detail='file too large')
    svc = services.StudentImportService(db)
    try:
        return svc.import_file(contents, file.filename, dry_run=dry_run)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get('/students/{student_id}', response_model=StudentOut)
def get_student(student_id: int, db: Session = Depends(get_session)):
    try:
        record = services.StudentService(db).get(student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return project(record)


@app.patch('/students/{student_id}', response_model=StudentOut)
def update_student(student_id: int, patch: StudentUpdate, db: Session = Depends(get_session)):
    """Partially update a student.

    Only the fields present in the request body are changed; sending a
    field with an empty string clears it.
    """
    svc = services.StudentService(db)
    try:
        record = svc.update(student_id, patch)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e))
    return project(record)


@app.delete('/students/{student_id}', status_code=204)
def delete_student(student_id: int, db: Session = Depends(get_session)):
    try:
        services.StudentService(db).delete(student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
