"""Abstract contract for image content storage."""

from abc import ABC, abstractmethod


class ContentStorageRepository(ABC):
    """Contract for storing and retrieving image content records.

    Implementations could be S3, GCS, local disk, etc.
    Content is addressed by its content id only; it carries no metadata
    and is never reachable by readers except through a metadata record.
    """

    @abstractmethod
    def put_content(self, *, content_id: str, data: bytes) -> str:
        """Store content bytes and return the storage key.

        Raises:
            StorageUnavailableError: If the upload fails
        """

    @abstractmethod
    def fetch_content(self, *, content_id: str) -> bytes | None:
        """Return the stored bytes, or None if no such content exists.

        Raises:
            StorageUnavailableError: If the download fails
        """

    @abstractmethod
    def remove_content(self, *, content_id: str) -> None:
        """Delete content; removing absent content is not an error.

        Raises:
            StorageUnavailableError: If the deletion fails
        """
