"""Abstract contract for paired image content and metadata storage."""

from abc import ABC, abstractmethod

from imggen_storage.core.models.image import ImageContent, ImageMetadata
from imggen_storage.core.utils.cancellation import CancellationSignal


class ImageRecordStore(ABC):
    """Durable storage for ImageContent/ImageMetadata pairs.

    Multi-record writes (`insert_pair`, `delete_by_metadata_id`) are atomic:
    readers observe either both records or neither. A cancellation signal
    seen before the commit point aborts the write with no persisted change.
    """

    @abstractmethod
    def insert_pair(
        self,
        content: ImageContent,
        metadata: ImageMetadata,
        *,
        cancel: CancellationSignal | None = None,
    ) -> None:
        """Persist content and metadata together.

        Raises:
            ConstraintViolationError: If the content id is already referenced
            OperationCancelledError: If cancelled before commit
            StorageUnavailableError: If the backing store fails
        """

    @abstractmethod
    def get_metadata_by_id(self, image_id: str) -> ImageMetadata | None:
        """Return metadata without loading content."""

    @abstractmethod
    def get_content_by_metadata_id(self, image_id: str) -> bytes | None:
        """Resolve metadata to its content and return the bytes."""

    @abstractmethod
    def update_metadata_description(
        self,
        image_id: str,
        description: str | None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        """Change only the description; False if the image does not exist."""

    @abstractmethod
    def delete_by_metadata_id(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        """Remove metadata and its content together; False if absent."""

    @abstractmethod
    def list_metadata(
        self,
        page: int,
        page_size: int,
        mime_type_filter: str | None = None,
    ) -> tuple[list[ImageMetadata], int]:
        """Return one page of metadata (newest first) and the matching total.

        `page` is clamped to >= 1 and `page_size` to [1, 100]. A blank
        filter means no filtering; filters are compared lowercased.
        """
