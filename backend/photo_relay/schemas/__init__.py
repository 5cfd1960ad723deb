"""
Pydantic schemas for API request/response validation.
"""
from photo_relay.schemas.upload import (
    UploadResponse,
    ErrorResponse,
    EnvironmentReport,
    DiagnosticResponse,
)

__all__ = [
    "UploadResponse",
    "ErrorResponse",
    "EnvironmentReport",
    "DiagnosticResponse",
]
