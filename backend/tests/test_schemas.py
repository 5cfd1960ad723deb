"""
Tests for Pydantic schemas validation.
"""
import pytest
from pydantic import ValidationError

from photo_relay.schemas.upload import DiagnosticResponse, EnvironmentReport, ErrorResponse, UploadResponse


class TestUploadSchemas:
    """Tests for upload schemas."""

    def test_upload_response_uses_camel_case(self):
        schema = UploadResponse(file_id="abc")
        assert schema.model_dump(by_alias=True) == {"success": True, "fileId": "abc"}

    def test_upload_response_accepts_alias(self):
        assert UploadResponse(fileId="abc").file_id == "abc"

    def test_upload_response_requires_id(self):
        with pytest.raises(ValidationError):
            UploadResponse(file_id="")

    def test_error_response_details_optional(self):
        schema = ErrorResponse(error="No file uploaded")
        assert schema.details is None


class TestDiagnosticSchemas:

    def test_environment_report_aliases(self):
        report = EnvironmentReport(
            environment="production",
            has_service_account_key=True,
            has_folder_id=False,
            drive_configured=False,
            allowed_origins=["https://a.org"],
        )
        response = DiagnosticResponse(message="ok", timestamp="2025-01-01T00:00:00+00:00", environment=report)

        data = response.model_dump(by_alias=True)
        assert data["environment"] == {
            "environment": "production",
            "hasServiceAccountKey": True,
            "hasFolderId": False,
            "driveConfigured": False,
            "allowedOrigins": ["https://a.org"],
        }
