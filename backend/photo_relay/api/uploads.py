"""
Upload endpoint.

POST /upload accepts one multipart field named "file" and relays it to the
configured Google Drive folder. Errors are raised as RelayError subclasses
and rendered as {"error": ..., "details": ...} by the app's exception handler.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from photo_relay.schemas.upload import ErrorResponse, UploadResponse
from photo_relay.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_upload_service(request: Request) -> UploadService:
    """FastAPI dependency returning the service built at app creation."""
    return request.app.state.upload_service


@router.post(
    "",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    service: UploadService = Depends(get_upload_service),
):
    """
    Relay a single image or video to storage.

    Flow:
    1. Validate type (image/* or video/*) then size (10 MiB cap)
    2. Check that Drive credential and folder are configured
    3. Create <epoch-millis>-<filename> in the folder
    4. Return the Drive file id
    """
    logger.info("Upload request received")
    file_id = await service.relay(file)
    return UploadResponse(success=True, file_id=file_id)
