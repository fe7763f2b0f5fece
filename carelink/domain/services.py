"""
Name: Domain Service Interfaces

Responsibilities:
  - Define the file storage contract used by upload ingestion

Collaborators:
  - infrastructure.storage: LocalFileStorage, S3FileStorageAdapter

Constraints:
  - Keys are storage-relative paths such as "homes/homePhotos-...png"
  - delete_file is idempotent (deleting a missing key is not an error)
"""

from typing import Protocol


class FileStoragePort(Protocol):
    """R: File storage contract (local disk, S3/MinIO)."""

    def upload_file(
        self, key: str, content: bytes, content_type: str | None
    ) -> None: ...

    def download_file(self, key: str) -> bytes: ...

    def delete_file(self, key: str) -> None: ...
