"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod

from imggen_storage.core.models.image import ImageMetadata


class MetadataRepository(ABC):
    """Contract for storing and retrieving image metadata.

    Implementations could be DynamoDB, PostgreSQL, MongoDB, etc.
    The 1:1 link between a metadata record and its content id is owned
    here. A content id is claimed by one image before its content is
    written (`claim_content`), the claim becomes permanent together with
    the record (`create_pair`), and `remove_pair` releases it atomically
    with the record itself.
    """

    @abstractmethod
    def claim_content(self, *, content_id: str, image_id: str) -> None:
        """Reserve a content id for one image, pending its metadata.

        Raises:
            ConstraintViolationError: If the content id is already claimed
            StorageUnavailableError: If the claim cannot be written
        """

    @abstractmethod
    def content_owner(self, *, content_id: str) -> str | None:
        """Image id holding the claim on a content id (pending or committed).

        Raises:
            StorageUnavailableError: If the lookup fails
        """

    @abstractmethod
    def release_content(self, *, content_id: str, image_id: str) -> bool:
        """Drop a pending claim, only if `image_id` still holds it.

        Returns:
            False if the claim belongs to someone else or is already gone

        Raises:
            StorageUnavailableError: If the release fails
        """

    @abstractmethod
    def create_pair(self, *, metadata: ImageMetadata) -> None:
        """Atomically create the metadata record and commit its content claim.

        The content id must have been claimed for `metadata.image_id`.

        Raises:
            ConstraintViolationError: If the image id is taken or the claim is not held
            StorageUnavailableError: If creation fails for other reasons
        """

    @abstractmethod
    def fetch_metadata(self, *, image_id: str) -> ImageMetadata | None:
        """Fetch metadata for a single image.

        Returns:
            The record, or None if not found

        Raises:
            StorageUnavailableError: If fetch fails
        """

    @abstractmethod
    def update_description(self, *, image_id: str, description: str | None) -> bool:
        """Replace the description of an existing record.

        Returns:
            False if the record does not exist

        Raises:
            StorageUnavailableError: If the update fails
        """

    @abstractmethod
    def remove_pair(self, *, metadata: ImageMetadata) -> bool:
        """Atomically delete the record and release its content id.

        Returns:
            False if the record was already gone

        Raises:
            StorageUnavailableError: If deletion fails
        """

    @abstractmethod
    def query_metadata(self, *, mime_type: str | None = None) -> list[ImageMetadata]:
        """Return all records, newest first, optionally for one MIME type.

        Raises:
            StorageUnavailableError: If the query fails
        """
