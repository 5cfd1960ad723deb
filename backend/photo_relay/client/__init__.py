"""
Upload client: picks one file and submits it to the relay.
"""
from photo_relay.client.uploader import (
    SelectedFile,
    UploadClient,
    UploadResult,
    UploadState,
    select_file,
)

__all__ = ["SelectedFile", "UploadClient", "UploadResult", "UploadState", "select_file"]
