"""
Upload relay service.

Handles the business logic of a single guest upload:
1. Intake: a file must be present, be an image or video, and fit the size cap
2. Configuration: storage handle and destination folder must exist
3. Forwarding: create the object in storage under a timestamped name
4. Result mapping: storage errors become user-facing UpstreamErrors

Each call is independent; the service only holds read-only configuration
and the shared store handle.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import UploadFile

from photo_relay.config import RelayConfig
from photo_relay.errors import (
    ClientInputError,
    ConfigurationError,
    StorageError,
    UpstreamError,
    GENERIC_UPLOAD_ERROR,
    describe_storage_error,
)
from photo_relay.storage.base import ObjectStore
from photo_relay.utils.logging import (
    log_upload_received,
    log_upload_rejected,
    log_upload_succeeded,
    log_upload_failed,
)
from photo_relay.utils.metrics import uploads_total, upload_size_bytes, storage_request_duration_seconds

logger = logging.getLogger(__name__)

ALLOWED_MIME_PREFIXES = ("image/", "video/")

NO_FILE_MESSAGE = "No file uploaded"
FILE_TYPE_MESSAGE = "Only image and video files are allowed"
DRIVE_NOT_CONFIGURED_MESSAGE = "Google Drive not configured. Service account key or folder ID missing."
FOLDER_NOT_SET_MESSAGE = "Google Drive folder ID not set in environment variables."


@dataclass(frozen=True)
class IncomingFile:
    """A fully buffered upload, discarded once forwarded."""
    data: bytes
    original_name: str
    mime_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def is_allowed_mime_type(mime_type: Optional[str]) -> bool:
    """Only images and videos are accepted."""
    return bool(mime_type) and mime_type.lower().startswith(ALLOWED_MIME_PREFIXES)


def file_too_large_message(limit: int) -> str:
    return f"File too large. Maximum size is {limit // (1024 * 1024)}MB"


def generate_object_name(original_name: str, now: Optional[float] = None) -> str:
    """
    Build the storage object name: <unix-epoch-millis>-<original filename>.

    The timestamp prefix keeps guests who upload files with the same name
    from colliding. It does not make uploads idempotent.

    Args:
        original_name: Filename as sent by the client
        now: Seconds since the epoch (defaults to time.time())

    Returns:
        Object name string
    """
    if now is None:
        now = time.time()
    return f"{round(now * 1000)}-{original_name}"


class UploadService:
    """
    Service for relaying uploads to the object store.

    Responsibilities:
    - Validate the incoming file (type first, then size)
    - Check that storage is configured
    - Forward the bytes and map the outcome
    """

    def __init__(
        self,
        config: RelayConfig,
        store: Optional[ObjectStore],
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.store = store
        self.clock = clock

    async def receive(self, upload: Optional[UploadFile]) -> IncomingFile:
        """
        Validate and buffer the uploaded file.

        Type is checked before size.

        Raises:
            ClientInputError: If the file is missing, of the wrong type, or too large
        """
        if upload is None or not upload.filename:
            log_upload_rejected(logger, reason="missing_file")
            uploads_total.labels(outcome="rejected_input").inc()
            raise ClientInputError(NO_FILE_MESSAGE)

        original_name = upload.filename
        mime_type = upload.content_type or ""

        if not is_allowed_mime_type(mime_type):
            log_upload_rejected(logger, reason="file_type", file_name=original_name, mime_type=mime_type)
            uploads_total.labels(outcome="rejected_input").inc()
            raise ClientInputError(FILE_TYPE_MESSAGE)

        limit = self.config.max_upload_bytes
        # Starlette knows the size once the multipart body is parsed
        declared_size = getattr(upload, "size", None)
        if declared_size is not None and declared_size > limit:
            self._reject_oversize(original_name, mime_type, declared_size)

        data = await upload.read(limit + 1)
        if len(data) > limit:
            self._reject_oversize(original_name, mime_type, len(data))

        incoming = IncomingFile(data=data, original_name=original_name, mime_type=mime_type)
        log_upload_received(
            logger,
            file_name=incoming.original_name,
            mime_type=incoming.mime_type,
            size_bytes=incoming.size_bytes,
        )
        return incoming

    def _reject_oversize(self, original_name: str, mime_type: str, size: int):
        log_upload_rejected(logger, reason="file_size", file_name=original_name, mime_type=mime_type, size_bytes=size)
        uploads_total.labels(outcome="rejected_input").inc()
        raise ClientInputError(file_too_large_message(self.config.max_upload_bytes))

    def ensure_configured(self) -> str:
        """
        Check that storage can be used.

        Returns:
            Destination folder id

        Raises:
            ConfigurationError: If the store or the folder id is missing
        """
        if self.store is None:
            log_upload_rejected(logger, reason="storage_not_configured")
            uploads_total.labels(outcome="rejected_config").inc()
            raise ConfigurationError(DRIVE_NOT_CONFIGURED_MESSAGE)
        if not self.config.folder_id:
            log_upload_rejected(logger, reason="folder_not_set")
            uploads_total.labels(outcome="rejected_config").inc()
            raise ConfigurationError(FOLDER_NOT_SET_MESSAGE)
        return self.config.folder_id

    async def forward(self, incoming: IncomingFile, folder_id: str) -> str:
        """
        Create the object in storage.

        The store call is blocking, so it runs in a worker thread.

        Returns:
            Storage object id

        Raises:
            UpstreamError: If the store rejects the call or anything else goes wrong
        """
        object_name = generate_object_name(incoming.original_name, self.clock())
        provider = self.store.provider
        start_time = time.time()

        logger.info(f"Attempting to upload {object_name} to {provider}...")
        try:
            file_id = await asyncio.to_thread(
                self.store.create_object,
                object_name,
                folder_id,
                incoming.mime_type,
                incoming.data,
            )
        except StorageError as e:
            duration = time.time() - start_time
            storage_request_duration_seconds.labels(provider=provider, status="error").observe(duration)
            uploads_total.labels(outcome="failed_upstream").inc()
            log_upload_failed(logger, object_name=object_name, error=e.message, code=e.code, duration_ms=duration * 1000)
            message, status_code = describe_storage_error(e.code)
            raise UpstreamError(message, details=e.message, status_code=status_code) from e
        except Exception as e:
            duration = time.time() - start_time
            storage_request_duration_seconds.labels(provider=provider, status="error").observe(duration)
            uploads_total.labels(outcome="failed_upstream").inc()
            log_upload_failed(logger, object_name=object_name, error=str(e), duration_ms=duration * 1000)
            raise UpstreamError(GENERIC_UPLOAD_ERROR, details=str(e)) from e

        duration = time.time() - start_time
        storage_request_duration_seconds.labels(provider=provider, status="success").observe(duration)
        uploads_total.labels(outcome="succeeded").inc()
        upload_size_bytes.observe(incoming.size_bytes)
        log_upload_succeeded(logger, file_id=file_id, object_name=object_name, duration_ms=duration * 1000)
        return file_id

    async def relay(self, upload: Optional[UploadFile]) -> str:
        """
        Run the whole lifecycle for one request: intake, config gate, forward.

        Returns:
            Storage object id of the created file
        """
        incoming = await self.receive(upload)
        folder_id = self.ensure_configured()
        return await self.forward(incoming, folder_id)
