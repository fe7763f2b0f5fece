"""
Name: Custom Exceptions

Responsibilities:
  - Define infrastructure-facing exceptions raised below the HTTP layer
  - Generate unique error IDs for log correlation

Collaborators:
  - exception_handlers.py: converts these into RFC 7807 responses
  - infrastructure.repositories: raise DatabaseError / DuplicateIdentityError
  - infrastructure.storage: raise StorageError subclasses

Notes:
  - error_id is UUID for log correlation
  - Business-rule failures are NOT exceptions; use cases return result
    objects carrying an IdentityError instead
"""

from uuid import uuid4


class CarelinkError(Exception):
    """Base exception for the CareLink application."""

    error_code: str = "CARELINK_ERROR"

    def __init__(self, message: str, error_id: str | None = None):
        self.message = message
        self.error_id = error_id or str(uuid4())
        super().__init__(message)


class DatabaseError(CarelinkError):
    """Database connection or query error."""

    error_code: str = "DATABASE_ERROR"


class DuplicateIdentityError(CarelinkError):
    """A unique constraint rejected an insert/update (lost uniqueness race)."""

    error_code: str = "CONFLICT"

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Duplicate value for {field}")


class PasswordHashingError(CarelinkError):
    """Password hashing failed; the calling write must be aborted."""

    error_code: str = "PASSWORD_HASHING_ERROR"
