"""
Upload client.

Captures one selected file, submits it to the relay as multipart form data
and tracks the transient UI state a picker needs:
- is_uploading: true while a request is in flight (disables the picker)
- upload_success: true after a successful upload, auto-cleared after 3 seconds

Every call settles to an UploadResult; network failures and non-2xx
responses both become failures, told apart only by their message.
"""
import asyncio
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001"
SUCCESS_FLAG_SECONDS = 3.0

NETWORK_ERROR_MESSAGE = "Network error"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
BUSY_MESSAGE = "Upload already in progress"


@dataclass(frozen=True)
class SelectedFile:
    """A file picked by the user, read once at selection time."""
    data: bytes
    name: str
    mime_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one submission. file_id is set iff success."""
    success: bool
    file_id: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, file_id: str) -> "UploadResult":
        return cls(success=True, file_id=file_id)

    @classmethod
    def failure(cls, message: str) -> "UploadResult":
        return cls(success=False, error_message=message)


@dataclass
class UploadState:
    """Transient UI flags. Nothing here outlives the process."""
    is_uploading: bool = False
    upload_success: bool = False


def default_alert(message: str) -> None:
    logger.error(message)


def select_file(path: str) -> SelectedFile:
    """
    Read a file chosen by the user.

    No size or type check happens here; the relay is authoritative.

    Args:
        path: Path to the file

    Returns:
        SelectedFile with the guessed MIME type
    """
    mime_type, _ = mimetypes.guess_type(path)
    with open(path, "rb") as fh:
        data = fh.read()
    return SelectedFile(
        data=data,
        name=os.path.basename(path),
        mime_type=mime_type or "application/octet-stream",
    )


class UploadClient:
    """Submit selected files to the relay's POST /upload endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        on_alert: Callable[[str], None] = default_alert,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        success_flag_seconds: float = SUCCESS_FLAG_SECONDS,
    ):
        """
        Args:
            base_url: Relay base URL (defaults to PHOTO_RELAY_API_URL or localhost:3001)
            token: Optional bearer token sent as the Authorization header
            on_alert: Called with a user-facing message when an upload fails
            transport: Custom httpx transport (used by tests)
            success_flag_seconds: How long upload_success stays set
        """
        self.base_url = (base_url or os.getenv("PHOTO_RELAY_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.token = token
        self.on_alert = on_alert
        self.state = UploadState()
        self.success_flag_seconds = success_flag_seconds
        self._transport = transport
        self._cookies = httpx.Cookies()

    def _headers(self) -> dict:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def submit(self, selected: SelectedFile) -> UploadResult:
        """
        Upload one file. Never raises for HTTP or network failures.

        Returns:
            UploadResult.ok(file_id) or UploadResult.failure(message)
        """
        if self.state.is_uploading:
            return UploadResult.failure(BUSY_MESSAGE)

        self.state.is_uploading = True
        try:
            result = await self._post(selected)
        finally:
            self.state.is_uploading = False

        if result.success:
            self._flag_success()
        else:
            self.on_alert(f"Upload failed: {result.error_message}")
        return result

    async def _post(self, selected: SelectedFile) -> UploadResult:
        files = {"file": (selected.name, selected.data, selected.mime_type)}
        logger.info(f"Uploading file: {selected.name} ({selected.size_bytes} bytes)")

        try:
            # Credentials travel with the request: cookies plus optional bearer token
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                cookies=self._cookies,
                headers=self._headers(),
            ) as client:
                response = await client.post("/upload", files=files)
                self._cookies.update(response.cookies)
        except httpx.HTTPError as e:
            logger.error(f"Upload failed: {e}")
            return UploadResult.failure(NETWORK_ERROR_MESSAGE)

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                data = None
            file_id = data.get("fileId") if isinstance(data, dict) else None
            if not file_id:
                return UploadResult.failure(UNKNOWN_ERROR_MESSAGE)
            return UploadResult.ok(file_id)

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        logger.error(f"Upload failed: {response.status_code} {error_data}")
        message = error_data.get("error") if isinstance(error_data, dict) else None
        return UploadResult.failure(message or UNKNOWN_ERROR_MESSAGE)

    def _flag_success(self) -> None:
        # A later upload inside the window is not guarded: the pending reset
        # still fires and may clear its flag early.
        self.state.upload_success = True
        loop = asyncio.get_running_loop()
        loop.call_later(self.success_flag_seconds, self._clear_success)

    def _clear_success(self) -> None:
        self.state.upload_success = False
