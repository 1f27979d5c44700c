"""Error types raised by the core, repository and service layers.

Routes translate these into HTTP responses; everything below the HTTP
layer raises them unmodified.
"""


class StudentError(Exception):
    """Base class for all student management errors."""


class ValidationError(StudentError):
    """A field value was rejected.

    Raised by the merge engine as a last-line re-check of values that
    should already have been validated by the request schemas.
    """

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class NotFoundError(StudentError):
    """No student exists for the requested id."""

    def __init__(self, student_id: int):
        super().__init__(f"student not found: {student_id}")
        self.student_id = student_id


class DuplicateEmailError(StudentError):
    """Another student already uses this email address."""

    def __init__(self, email: str):
        super().__init__(f"email already registered: {email}")
        self.email = email
