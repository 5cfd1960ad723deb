"""
Storage module for the external object store (Google Drive).

The relay forwards each uploaded file into a single Drive folder.
"""
from photo_relay.storage.base import ObjectStore
from photo_relay.storage.drive_client import DriveObjectStore, build_object_store

__all__ = ["ObjectStore", "DriveObjectStore", "build_object_store"]
