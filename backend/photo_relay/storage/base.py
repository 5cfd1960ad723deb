"""
Base class for object stores.
The upload service only depends on this interface, so tests can swap in
an in-memory store instead of talking to Google Drive.
"""
from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """
    Abstract "create object" capability of a cloud storage API.

    Implementations must raise `photo_relay.errors.StorageError` when the
    storage API rejects the call.
    """

    @abstractmethod
    def create_object(self, name: str, parent_id: str, mime_type: str, data: bytes) -> str:
        """
        Create a new object inside a folder.

        Args:
            name: Object name as it should appear in storage
            parent_id: Identifier of the destination folder
            mime_type: MIME type stored with the object
            data: Full object content

        Returns:
            Opaque identifier of the created object

        Raises:
            StorageError: If the storage API rejects the call
        """
        pass

    @property
    def provider(self) -> str:
        """Short provider name used in logs."""
        return type(self).__name__
