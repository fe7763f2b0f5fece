"""Infrastructure adapters: file storage."""

from .errors import (
    StorageConfigurationError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUnavailableError,
)
from .local_file_storage import LocalFileStorage
from .s3_file_storage import S3Config, S3FileStorageAdapter

__all__ = [
    "LocalFileStorage",
    "S3Config",
    "S3FileStorageAdapter",
    "StorageError",
    "StorageConfigurationError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "StorageUnavailableError",
]
