"""
Name: Local File Storage Adapter

Responsibilities:
  - Implement FileStoragePort on a local directory (UPLOAD_DIR)
  - Keep every key inside the storage root
  - Map OSError into StorageError

Constraints:
  - Keys are relative POSIX paths ("licenses/licenseDocument-...pdf")
  - Writes go to a temporary sibling first, then os.replace, so a
    reader never sees a half-written file
"""

import os
import tempfile
from pathlib import Path, PurePosixPath

from ...logger import logger
from .errors import StorageConfigurationError, StorageError, StorageNotFoundError


class LocalFileStorage:
    """R: FileStoragePort backed by the local filesystem."""

    def __init__(self, root: str | os.PathLike):
        if not str(root).strip():
            raise StorageConfigurationError("Storage root directory is required.")
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        relative = PurePosixPath((key or "").strip())
        if (
            not relative.parts
            or relative.is_absolute()
            or any(part in ("..", ".") for part in relative.parts)
        ):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._root.joinpath(*relative.parts)

    def upload_file(self, key: str, content: bytes, content_type: str | None) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.exception("Local storage write failed", extra={"key": key})
            raise StorageError(f"Storage write failed for {key}") from exc

    def download_file(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise StorageNotFoundError(key) from exc
        except OSError as exc:
            raise StorageError(f"Storage read failed for {key}") from exc

    def delete_file(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.exception("Local storage delete failed", extra={"key": key})
            raise StorageError(f"Storage delete failed for {key}") from exc
