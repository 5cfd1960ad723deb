"""
Pydantic schemas for upload and diagnostic endpoints.

Wire field names are camelCase (fileId, hasFolderId, ...) because the
browser client reads them as-is.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class UploadResponse(BaseModel):
    """Schema for a successful upload."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    file_id: str = Field(..., alias="fileId", min_length=1, description="Opaque storage object id")


class ErrorResponse(BaseModel):
    """Schema for any failed request."""
    error: str
    details: Optional[str] = None


class EnvironmentReport(BaseModel):
    """Configuration presence report. Never carries secrets."""
    model_config = ConfigDict(populate_by_name=True)

    environment: str
    has_service_account_key: bool = Field(..., alias="hasServiceAccountKey")
    has_folder_id: bool = Field(..., alias="hasFolderId")
    drive_configured: bool = Field(..., alias="driveConfigured")
    allowed_origins: List[str] = Field(default_factory=list, alias="allowedOrigins")


class DiagnosticResponse(BaseModel):
    """Schema for GET /test."""
    message: str
    timestamp: str
    environment: EnvironmentReport
