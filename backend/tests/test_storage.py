"""
Tests for the Google Drive object store.
The Drive service is mocked; nothing here talks to Google.
"""
import json
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from photo_relay.errors import StorageError
from photo_relay.storage.drive_client import (
    DriveObjectStore,
    build_object_store,
    load_service_account_info,
)
from tests.conftest import make_settings


def make_service(response=None, error=None) -> MagicMock:
    service = MagicMock()
    request = service.files.return_value.create.return_value
    if error is not None:
        request.execute.side_effect = error
    else:
        request.execute.return_value = response
    return service


def http_error(status: int, message: str) -> HttpError:
    resp = httplib2.Response({"status": str(status)})
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class TestDriveObjectStore:

    def test_create_object_sends_metadata_and_media(self):
        service = make_service(response={"id": "abc123"})
        store = DriveObjectStore(service)

        file_id = store.create_object("1700000000123-photo.jpg", "folder-123", "image/jpeg", b"data")

        assert file_id == "abc123"
        kwargs = service.files.return_value.create.call_args.kwargs
        assert kwargs["body"] == {"name": "1700000000123-photo.jpg", "parents": ["folder-123"]}
        assert kwargs["fields"] == "id"
        media = kwargs["media_body"]
        assert media.mimetype() == "image/jpeg"
        assert media.size() == 4

    @pytest.mark.parametrize("status", [401, 403, 404, 500])
    def test_http_errors_carry_status_code(self, status):
        service = make_service(error=http_error(status, "Drive refused"))
        store = DriveObjectStore(service)

        with pytest.raises(StorageError) as exc_info:
            store.create_object("x.jpg", "folder", "image/jpeg", b"data")

        assert exc_info.value.code == status
        assert exc_info.value.message

    def test_refresh_error_is_authentication_failure(self):
        service = make_service(error=RefreshError("invalid_grant: Invalid JWT Signature."))
        store = DriveObjectStore(service)

        with pytest.raises(StorageError) as exc_info:
            store.create_object("x.jpg", "folder", "image/jpeg", b"data")

        assert exc_info.value.code == 401
        assert "invalid_grant" in exc_info.value.message

    def test_auth_transport_error_has_no_code(self):
        service = make_service(error=TransportError("Connection reset by peer"))
        store = DriveObjectStore(service)

        with pytest.raises(StorageError) as exc_info:
            store.create_object("x.jpg", "folder", "image/jpeg", b"data")

        assert exc_info.value.code is None

    def test_missing_id_is_error(self):
        store = DriveObjectStore(make_service(response={}))

        with pytest.raises(StorageError):
            store.create_object("x.jpg", "folder", "image/jpeg", b"data")

    def test_provider_name(self):
        assert DriveObjectStore(MagicMock()).provider == "google_drive"


class TestServiceAccountLoading:

    def test_json_string(self):
        info = load_service_account_info('  {"type": "service_account", "project_id": "p"} ')
        assert info["project_id"] == "p"

    def test_file_path(self, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text(json.dumps({"type": "service_account"}), encoding="utf-8")

        assert load_service_account_info(str(key_file)) == {"type": "service_account"}

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            load_service_account_info("not-a-key")

    def test_malformed_json(self):
        with pytest.raises(ValueError):
            load_service_account_info("{not json")


class TestBuildObjectStore:

    def test_missing_key_returns_none(self):
        assert build_object_store(make_settings(google_service_account_key=None)) is None

    def test_missing_folder_returns_none(self):
        assert build_object_store(make_settings(google_drive_folder_id=None)) is None

    def test_unparseable_key_returns_none(self):
        assert build_object_store(make_settings(google_service_account_key="{broken")) is None

    def test_incomplete_key_returns_none(self):
        # Parses as JSON but lacks the fields google-auth needs
        assert build_object_store(make_settings(google_service_account_key='{"type": "service_account"}')) is None

    def test_valid_key_builds_drive_store(self):
        sentinel = DriveObjectStore(MagicMock())
        with patch.object(DriveObjectStore, "from_service_account_info", return_value=sentinel) as factory:
            store = build_object_store(make_settings(google_service_account_key='{"type": "service_account"}'))

        assert store is sentinel
        factory.assert_called_once_with({"type": "service_account"})
