"""
Name: Upload Ingestion & Validation

Responsibilities:
  - Declare the closed set of upload fields and their policies
  - Validate incoming files (size, type, count) before anything is stored
  - Derive collision-resistant storage keys
  - Stage files to storage and remove them again unless committed

Collaborators:
  - domain.services.FileStoragePort: where staged files land
  - api.uploads: converts multipart parts into IncomingFile
  - use cases: register/update flows stage files through StagedUploads

Constraints:
  - Every UploadField has exactly one policy (checked at import)
  - Photo rules are the single allow-list used for every photo field
  - A file is accepted only when BOTH its MIME type and extension match

Notes:
  - UploadRejectedError carries the user-facing message; the HTTP layer
    maps it to a 400 validation problem
"""

import os
import secrets
import time
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

from ..domain.services import FileStoragePort
from ..infrastructure.storage.errors import StorageError
from ..logger import logger


class UploadField(str, Enum):
    """R: Multipart field names that carry files."""

    LICENSE_DOCUMENT = "licenseDocument"
    HOME_PHOTOS = "homePhotos"
    PROFILE_PHOTO = "profilePhoto"


class UploadRejectedError(Exception):
    """Raised when an incoming file violates its field policy."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


PHOTO_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif"})
PHOTO_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif"})

LICENSE_MIME_TYPES = frozenset({"application/pdf", "image/jpeg", "image/jpg", "image/png"})
LICENSE_EXTENSIONS = frozenset({".pdf", ".jpeg", ".jpg", ".png"})

FILE_TOO_LARGE_MESSAGE = "File is too large. Maximum size allowed is 5MB."


@dataclass(frozen=True)
class UploadPolicy:
    field: UploadField
    subfolder: str
    max_files: int
    mime_types: frozenset
    extensions: frozenset
    type_message: str
    count_message: str

    def count_error(self, limit: int) -> str:
        return self.count_message.format(limit=limit)

    def accepts(self, content_type: str, extension: str) -> bool:
        return (
            content_type.lower() in self.mime_types
            and extension.lower() in self.extensions
        )


UPLOAD_POLICIES: dict[UploadField, UploadPolicy] = {
    UploadField.LICENSE_DOCUMENT: UploadPolicy(
        field=UploadField.LICENSE_DOCUMENT,
        subfolder="licenses",
        max_files=1,
        mime_types=LICENSE_MIME_TYPES,
        extensions=LICENSE_EXTENSIONS,
        type_message="License document must be a PDF or image file (JPG, JPEG, PNG)",
        count_message="Only one license document may be uploaded",
    ),
    UploadField.HOME_PHOTOS: UploadPolicy(
        field=UploadField.HOME_PHOTOS,
        subfolder="homes",
        max_files=5,
        mime_types=PHOTO_MIME_TYPES,
        extensions=PHOTO_EXTENSIONS,
        type_message="Home photos must be image files (JPG, JPEG, PNG, GIF)",
        count_message="You can upload a maximum of {limit} home photos",
    ),
    UploadField.PROFILE_PHOTO: UploadPolicy(
        field=UploadField.PROFILE_PHOTO,
        subfolder="profiles",
        max_files=1,
        mime_types=PHOTO_MIME_TYPES,
        extensions=PHOTO_EXTENSIONS,
        type_message="Profile photo must be an image file (JPG, JPEG, PNG, GIF)",
        count_message="Only one profile photo may be uploaded",
    ),
}

if set(UPLOAD_POLICIES) != set(UploadField):
    raise RuntimeError("Every UploadField needs an UploadPolicy")


def policy_for(field: UploadField | str) -> UploadPolicy:
    """R: Resolve the policy for a field; unknown names are rejected."""
    try:
        return UPLOAD_POLICIES[UploadField(field)]
    except ValueError as exc:
        raise UploadRejectedError(f"Unexpected upload field: {field}") from exc


@dataclass(frozen=True)
class IncomingFile:
    """R: One uploaded file, fully read into memory."""

    field: UploadField
    filename: str
    content_type: str
    content: bytes

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename or "")[1].lower()

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadLimits:
    max_file_bytes: int = 5_000_000
    max_home_photos: int = 5


def is_allowed_file(file: IncomingFile) -> bool:
    return policy_for(file.field).accepts(file.content_type or "", file.extension)


def validate_uploads(
    files: Sequence[IncomingFile], limits: UploadLimits | None = None
) -> None:
    """
    R: Ingestion checks run before business validation.

    Raises:
        UploadRejectedError: on the first count, size or type violation
    """
    limits = limits or UploadLimits()
    counts = Counter(policy_for(f.field).field for f in files)

    for field, count in counts.items():
        policy = UPLOAD_POLICIES[field]
        max_files = policy.max_files
        if field == UploadField.HOME_PHOTOS:
            max_files = limits.max_home_photos
        if count > max_files:
            raise UploadRejectedError(policy.count_error(max_files))

    for file in files:
        if file.size > limits.max_file_bytes:
            raise UploadRejectedError(FILE_TOO_LARGE_MESSAGE)
        if not is_allowed_file(file):
            raise UploadRejectedError(policy_for(file.field).type_message)


def derive_storage_key(
    field: UploadField,
    extension: str,
    *,
    now_ms: int | None = None,
    token: str | None = None,
) -> str:
    """R: <subfolder>/<field>-<millis>-<hex><ext>"""
    policy = policy_for(field)
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = token or secrets.token_hex(6)
    return f"{policy.subfolder}/{policy.field.value}-{millis}-{suffix}{extension.lower()}"


class StagedUploads:
    """
    R: Write files to storage; remove them again unless commit() is called.

    Usage:
        with StagedUploads(storage) as staged:
            key = staged.stage(file)
            repository.create(...)
            staged.commit()
    """

    def __init__(self, storage: FileStoragePort):
        self._storage = storage
        self._keys: List[str] = []
        self._committed = False

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    def stage(self, file: IncomingFile) -> str:
        key = derive_storage_key(file.field, file.extension)
        self._storage.upload_file(key, file.content, file.content_type)
        self._keys.append(key)
        return key

    def stage_all(self, files: Iterable[IncomingFile]) -> List[str]:
        return [self.stage(f) for f in files]

    def commit(self) -> None:
        self._committed = True

    def __enter__(self) -> "StagedUploads":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self._committed:
            self.discard()
        return False

    def discard(self) -> None:
        """R: Delete every staged file (newest first)."""
        for key in reversed(self._keys):
            try:
                self._storage.delete_file(key)
            except StorageError:
                logger.warning("Staged upload cleanup failed", extra={"key": key})
        self._keys.clear()


def remove_stored_files(storage: FileStoragePort, keys: Iterable[str]) -> None:
    """R: Delete files that are no longer referenced by any identity."""
    for key in keys:
        try:
            storage.delete_file(key)
        except StorageError:
            logger.warning("Stored file cleanup failed", extra={"key": key})
