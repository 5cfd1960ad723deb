"""
Business logic services.
"""
from photo_relay.services.upload_service import UploadService, IncomingFile

__all__ = [
    "UploadService",
    "IncomingFile",
]
