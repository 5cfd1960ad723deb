"""
Google Drive object store.

Uses google-api-python-client (Drive v3) with service account credentials
from google-auth. The service account only needs the drive.file scope and
must be granted access to the destination folder.
"""
import io
import json
import logging
import os
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from photo_relay.config import Settings
from photo_relay.errors import StorageError
from photo_relay.storage.base import ObjectStore

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.file"]


class DriveObjectStore(ObjectStore):
    """
    Object store backed by a Google Drive folder.

    The Drive service handle is created once and shared by every request.
    """

    def __init__(self, service: Any):
        """
        Args:
            service: Drive v3 resource as returned by googleapiclient.discovery.build
        """
        self._service = service

    @classmethod
    def from_service_account_info(cls, info: dict) -> "DriveObjectStore":
        credentials = service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)
        service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(service)

    @property
    def provider(self) -> str:
        return "google_drive"

    def create_object(self, name: str, parent_id: str, mime_type: str, data: bytes) -> str:
        metadata = {
            "name": name,
            "parents": [parent_id],
        }
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)

        try:
            response = self._service.files().create(
                body=metadata,
                media_body=media,
                fields="id",
            ).execute()
        except HttpError as e:
            raise StorageError(_http_error_message(e), code=_http_error_status(e)) from e
        except RefreshError as e:
            # Token exchange with Google was refused
            raise StorageError(str(e), code=401) from e
        except GoogleAuthError as e:
            raise StorageError(str(e)) from e

        file_id = response.get("id") if response else None
        if not file_id:
            raise StorageError("Google Drive returned no file id")

        logger.debug(f"Created Drive file {file_id} in folder {parent_id}")
        return file_id


def _http_error_status(error: HttpError) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None and getattr(error, "resp", None) is not None:
        status = getattr(error.resp, "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _http_error_message(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    return str(reason) if reason else str(error)


def load_service_account_info(raw: str) -> dict:
    """
    Parse a service account credential.

    Supports two forms:
    1. JSON string (the whole key file content)
    2. Path to a JSON key file

    Args:
        raw: Value of GOOGLE_SERVICE_ACCOUNT_KEY

    Returns:
        Parsed service account dictionary

    Raises:
        ValueError: If the value is neither valid JSON nor a readable JSON file
    """
    candidate = raw.strip()
    if candidate.startswith("{"):
        return json.loads(candidate)

    if os.path.exists(candidate):
        with open(candidate, "r", encoding="utf-8") as fh:
            return json.load(fh)

    raise ValueError("Service account key is neither a JSON document nor an existing file path")


def build_object_store(settings: Settings) -> Optional[ObjectStore]:
    """
    Create the Drive object store from settings.

    Fails gracefully: returns None when the credential or folder id is
    missing, or when the credential cannot be parsed. The upload endpoint
    then answers with a configuration error.

    Returns:
        DriveObjectStore instance, or None if not configured
    """
    if not (settings.google_service_account_key and settings.google_drive_folder_id):
        logger.warning(
            "Missing service account key or folder ID. File uploads will not work. "
            "Set GOOGLE_SERVICE_ACCOUNT_KEY and GOOGLE_DRIVE_FOLDER_ID."
        )
        return None

    try:
        info = load_service_account_info(settings.google_service_account_key)
        store = DriveObjectStore.from_service_account_info(info)
    except (ValueError, GoogleAuthError) as e:
        logger.error(f"Failed to parse service account key: {e}")
        return None

    logger.info("Google Drive service account authentication configured.")
    return store
