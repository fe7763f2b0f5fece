"""
Name: Storage Errors

Responsibilities:
  - Define a common failure vocabulary for the file storage subsystem
  - Keep filesystem / boto3 exceptions from leaking into upper layers

Collaborators:
  - local_file_storage.py, s3_file_storage.py (raise these)
  - exception_handlers.py (maps StorageError to 503)
"""

from ...exceptions import CarelinkError


class StorageError(CarelinkError):
    """Base error for the storage subsystem."""

    error_code: str = "STORAGE_ERROR"


class StorageConfigurationError(StorageError):
    """Invalid or incomplete storage adapter configuration."""


class StorageNotFoundError(StorageError):
    """Object not found in storage."""

    def __init__(self, key: str):
        super().__init__(f"File not found in storage. key={key}")
        self.key = key


class StoragePermissionError(StorageError):
    """Missing permissions or invalid credentials."""

    def __init__(self, message: str = "Storage permission denied."):
        super().__init__(message)


class StorageUnavailableError(StorageError):
    """Storage down or temporarily unavailable."""

    def __init__(self, message: str = "Storage unavailable."):
        super().__init__(message)
