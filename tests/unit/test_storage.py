"""
Unit tests for the file storage adapters (local filesystem and S3).
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from carelink.infrastructure.storage import (
    LocalFileStorage,
    S3Config,
    S3FileStorageAdapter,
    StorageConfigurationError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUnavailableError,
)

pytestmark = pytest.mark.unit


class TestLocalFileStorage:
    def test_upload_download_delete(self, storage):
        storage.upload_file("profiles/a.png", b"data", "image/png")

        assert storage.download_file("profiles/a.png") == b"data"

        storage.delete_file("profiles/a.png")
        with pytest.raises(StorageNotFoundError):
            storage.download_file("profiles/a.png")

    def test_delete_missing_file_is_a_no_op(self, storage):
        storage.delete_file("profiles/missing.png")

    @pytest.mark.parametrize("key", ["", "../escape.png", "/etc/passwd", "profiles/../../x.png"])
    def test_keys_outside_root_are_refused(self, storage, key):
        with pytest.raises(StorageError):
            storage.upload_file(key, b"data", "image/png")

    def test_root_is_required(self):
        with pytest.raises(StorageConfigurationError):
            LocalFileStorage("  ")


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


class TestS3FileStorageAdapter:
    def _adapter(self, client):
        config = S3Config(bucket="carelink", access_key="key", secret_key="secret")
        return S3FileStorageAdapter(config, client=client)

    def test_upload_puts_object(self):
        client = MagicMock()

        self._adapter(client).upload_file("homes/a.png", b"img", "image/png")

        client.put_object.assert_called_once_with(
            Bucket="carelink", Key="homes/a.png", Body=b"img", ContentType="image/png"
        )

    def test_missing_credentials_are_rejected(self):
        with pytest.raises(StorageConfigurationError):
            S3FileStorageAdapter(S3Config(bucket="b", access_key="", secret_key=""))

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("NoSuchKey", StorageNotFoundError),
            ("AccessDenied", StoragePermissionError),
            ("SlowDown", StorageUnavailableError),
            ("Weird", StorageError),
        ],
    )
    def test_client_errors_are_mapped(self, code, expected):
        client = MagicMock()
        client.get_object.side_effect = _client_error(code)

        with pytest.raises(expected):
            self._adapter(client).download_file("homes/a.png")

    def test_connection_errors_are_unavailable(self):
        client = MagicMock()
        client.delete_object.side_effect = EndpointConnectionError(endpoint_url="http://s3")

        with pytest.raises(StorageUnavailableError):
            self._adapter(client).delete_file("homes/a.png")
