"""
Error taxonomy for the upload relay.

Every error raised while handling a request is a `RelayError` and is turned
into a JSON body of the form {"error": ..., "details": ...} by the exception
handler registered in `photo_relay.main`.
"""
from typing import Optional, Tuple

from fastapi import status


class RelayError(Exception):
    """Base class for errors reported to the uploading client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ClientInputError(RelayError):
    """No file, disallowed type or oversized payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(RelayError):
    """Storage credential or destination folder missing. Needs operator action."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamError(RelayError):
    """The storage API rejected the create call."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(Exception):
    """
    Raised by object store implementations.

    Attributes:
        code: Numeric error code reported by the storage API (None if unknown)
        message: Raw error text from the storage API
    """

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


GENERIC_UPLOAD_ERROR = "Failed to upload file"

_STORAGE_ERROR_MESSAGES = {
    401: "Google Drive authentication failed. Please check your service account.",
    403: "Access denied to Google Drive folder. Please check folder permissions.",
    404: "Google Drive folder not found. Please check the folder ID.",
}


def describe_storage_error(code: Optional[int]) -> Tuple[str, int]:
    """
    Map a storage API error code to a user-facing message and HTTP status.

    Args:
        code: Error code from the storage API (401, 403, 404, anything else)

    Returns:
        Tuple of (message, http_status). The status is always 500: the
        failure is on the relay's side of the call, not the guest's.
    """
    message = _STORAGE_ERROR_MESSAGES.get(code, GENERIC_UPLOAD_ERROR)
    return message, status.HTTP_500_INTERNAL_SERVER_ERROR
