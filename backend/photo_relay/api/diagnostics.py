"""
Diagnostic endpoint.
Reports whether the relay is configured, without exposing secrets.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from photo_relay.schemas.upload import DiagnosticResponse, EnvironmentReport

router = APIRouter()


@router.get("", response_model=DiagnosticResponse)
async def test_endpoint(request: Request):
    """
    Liveness and configuration check.
    Returns configuration presence flags and the current timestamp.
    """
    service = request.app.state.upload_service
    config = service.config

    return DiagnosticResponse(
        message="Server is working!",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=EnvironmentReport(
            environment=config.environment,
            has_service_account_key=config.has_service_account_key,
            has_folder_id=bool(config.folder_id),
            drive_configured=service.store is not None,
            allowed_origins=list(config.allowed_origins),
        ),
    )
