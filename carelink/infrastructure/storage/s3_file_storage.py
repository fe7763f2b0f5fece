"""
Name: S3 File Storage Adapter

Responsibilities:
  - Implement FileStoragePort against S3-compatible storage (AWS S3 / MinIO)
  - Encapsulate boto3 (ClientError never leaves this module)

Collaborators:
  - domain.services.FileStoragePort (port)
  - infrastructure.storage.errors (typed errors)
  - boto3/botocore (SDK, hidden behind this adapter)

Notes:
  - Selected by the container when S3_BUCKET is configured
  - boto3 is imported lazily to keep startup cheap for local storage
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...logger import logger
from .errors import (
    StorageConfigurationError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUnavailableError,
)


@dataclass(frozen=True)
class S3Config:
    bucket: str
    access_key: str
    secret_key: str
    region: Optional[str] = None
    endpoint_url: Optional[str] = None


class S3FileStorageAdapter:
    """R: S3-compatible FileStoragePort."""

    def __init__(self, config: S3Config, *, client=None) -> None:
        self._bucket = (config.bucket or "").strip()

        if not self._bucket:
            raise StorageConfigurationError("S3 bucket is required.")
        if (
            not (config.access_key or "").strip()
            or not (config.secret_key or "").strip()
        ):
            raise StorageConfigurationError(
                "S3 credentials are required (access_key/secret_key)."
            )

        # R: Injectable client for tests
        if client is not None:
            self._client = client
            return

        import boto3

        self._client = boto3.client(
            "s3",
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region or None,
            endpoint_url=config.endpoint_url or None,
        )

    def upload_file(self, key: str, content: bytes, content_type: str | None) -> None:
        self._require_key(key)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=(content_type or "application/octet-stream").strip(),
            )
        except Exception as exc:
            raise self._map_storage_error(exc, key=key, action="upload") from exc

    def download_file(self, key: str) -> bytes:
        self._require_key(key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except Exception as exc:
            raise self._map_storage_error(exc, key=key, action="download") from exc

    def delete_file(self, key: str) -> None:
        """R: S3 deletes are idempotent; a missing key is not an error."""
        self._require_key(key)
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except Exception as exc:
            raise self._map_storage_error(exc, key=key, action="delete") from exc

    @staticmethod
    def _require_key(key: str) -> None:
        if not (key or "").strip():
            raise StorageError("Storage key is required.")

    def _map_storage_error(
        self, exc: Exception, *, key: str, action: str
    ) -> StorageError:
        """R: Translate SDK errors into the storage error vocabulary."""
        from botocore.exceptions import (
            ClientError,
            ConnectTimeoutError,
            EndpointConnectionError,
            ReadTimeoutError,
        )

        if isinstance(exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            logger.warning("Storage unavailable", extra={"action": action, "key": key})
            return StorageUnavailableError("Storage unavailable (timeout/connection).")

        if isinstance(exc, ClientError):
            code = str((exc.response.get("Error") or {}).get("Code") or "")

            if code in {"NoSuchKey", "404", "NotFound"}:
                return StorageNotFoundError(key)

            if code in {"AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"}:
                return StoragePermissionError("Invalid storage credentials or permissions.")

            if code in {"SlowDown", "RequestTimeout", "ServiceUnavailable"}:
                return StorageUnavailableError("Storage temporarily unavailable.")

            logger.exception(
                "Storage ClientError",
                extra={"action": action, "key": key, "code": code},
            )
            return StorageError(f"Storage failure ({action}). code={code}")

        logger.exception("Storage error", extra={"action": action, "key": key})
        return StorageError(f"Storage failure ({action}).")
