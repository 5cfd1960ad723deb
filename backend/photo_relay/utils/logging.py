"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- file_name
- mime_type
- size_bytes
- duration_ms

Usage:
    from photo_relay.utils.logging import configure_logging, log_upload_succeeded

    configure_logging('photo-relay', 'INFO')
    log_upload_succeeded(logger, file_id='abc', object_name='1700000000000-photo.jpg', duration_ms=812.4)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (photo-relay or photo-relay-client)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for container logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        # Configure root logger
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    size_bytes: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        file_name: Optional original file name
        mime_type: Optional MIME type
        size_bytes: Optional payload size
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if file_name:
        extra["file_name"] = file_name
    if mime_type:
        extra["mime_type"] = mime_type
    if size_bytes is not None:
        extra["size_bytes"] = size_bytes
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_upload_received(
    logger: logging.Logger,
    file_name: str,
    mime_type: str,
    size_bytes: int,
    **kwargs
):
    """
    Log that a file reached the upload endpoint.

    Args:
        logger: Logger instance
        file_name: Original file name (required)
        mime_type: Declared MIME type (required)
        size_bytes: Payload size in bytes (required)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_received",
        file_name=file_name,
        mime_type=mime_type,
        size_bytes=size_bytes,
        **kwargs
    )
    logger.info(f"File received: {file_name}", extra=extra)


def log_upload_rejected(
    logger: logging.Logger,
    reason: str,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    size_bytes: Optional[int] = None,
    **kwargs
):
    """Log a request rejected before reaching storage (bad input or config)."""
    extra = _build_log_extra(
        event="upload_rejected",
        file_name=file_name,
        mime_type=mime_type,
        size_bytes=size_bytes,
        reason=reason,
        **kwargs
    )
    logger.warning(f"Upload rejected: {reason}", extra=extra)


def log_upload_succeeded(
    logger: logging.Logger,
    file_id: str,
    object_name: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a successful forward to storage.

    Args:
        logger: Logger instance
        file_id: Storage object identifier (required)
        object_name: Generated object name (required)
        duration_ms: Optional storage call duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_succeeded",
        duration_ms=duration_ms,
        file_id=file_id,
        object_name=object_name,
        **kwargs
    )
    logger.info(f"Upload successful: {file_id}", extra=extra)


def log_upload_failed(
    logger: logging.Logger,
    object_name: str,
    error: str,
    code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log a storage failure.

    Args:
        logger: Logger instance
        object_name: Generated object name (required)
        error: Raw error message (required)
        code: Error code reported by the storage API
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: True for errors)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_failed",
        duration_ms=duration_ms,
        object_name=object_name,
        error=str(error),
        **kwargs
    )
    if code is not None:
        extra["code"] = code

    message = f"Upload failed: {object_name} - {error}"

    # Include stack trace for errors (production-safe)
    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
        else:
            logger.error(message, extra=extra)
    else:
        logger.error(message, extra=extra)


def log_cors_blocked(logger: logging.Logger, origin: str, path: str, **kwargs):
    """Log a request refused by the origin allow-list."""
    extra = _build_log_extra(event="cors_blocked", origin=origin, path=path, **kwargs)
    logger.warning(f"CORS blocked origin: {origin}", extra=extra)


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
