"""Application service for validated, transactional image storage.

This module is the single entry point handlers use to store, read,
update, list and delete images. It combines the metadata validation
policy with an ImageRecordStore and keeps no state between calls.
"""

import uuid

from imggen_storage.core.filters.page_pagination import PagePagination
from imggen_storage.core.infrastructure.aws.aws_record_store import AwsImageRecordStore
from imggen_storage.core.models.errors import ValidationFailedError
from imggen_storage.core.models.image import ImageContent, ImageMetadata
from imggen_storage.core.repositories.record_store import ImageRecordStore
from imggen_storage.core.utils.cancellation import CancellationSignal, raise_if_cancelled
from imggen_storage.core.utils.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    SUPPORTED_MIME_TYPES,
)
from imggen_storage.core.utils.mime import is_supported_mime_type, normalize_mime_type
from imggen_storage.core.utils.time import utc_now_iso
from imggen_storage.core.validation.image_metadata_policy import ImageMetadataPolicy


class ImageStorageService:
    """Application service responsible for image content and metadata.

    Per image the lifecycle is:
    nonexistent -> stored -> [description updated]* -> deleted

    Missing images are reported as None/False, never as errors. Every
    other failure (validation, constraint, storage, cancellation)
    propagates to the caller unchanged.
    """

    def __init__(
        self,
        store: ImageRecordStore | None = None,
        policy: ImageMetadataPolicy | None = None,
    ) -> None:
        self.records: ImageRecordStore = store if store is not None else AwsImageRecordStore()
        self.policy = policy or ImageMetadataPolicy()

    @staticmethod
    def generate_image_id() -> str:
        """Generate a unique image (metadata) identifier."""
        return f"img_{uuid.uuid4().hex}"

    @staticmethod
    def generate_content_id() -> str:
        """Generate a unique content identifier."""
        return f"cnt_{uuid.uuid4().hex}"

    @staticmethod
    def supported_mime_types() -> frozenset[str]:
        return SUPPORTED_MIME_TYPES

    @staticmethod
    def is_supported_mime_type(mime_type: str) -> bool:
        return is_supported_mime_type(mime_type)

    def store(
        self,
        data: bytes,
        file_name: str,
        mime_type: str,
        description: str | None = None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> str:
        """Validate and persist a new image, returning its image id.

        The flow is:
        1. Build the content record and its metadata record
        2. Validate the metadata (no I/O happens if this fails)
        3. Insert both records atomically

        Raises:
            ValidationFailedError: If the metadata breaks any rule
            ConstraintViolationError: If storage rejects the pair
            OperationCancelledError: If cancelled before commit
            StorageUnavailableError: If the backing store fails
        """
        content = ImageContent(content_id=self.generate_content_id(), data=data)
        metadata = ImageMetadata(
            image_id=self.generate_image_id(),
            content_id=content.content_id,
            original_file_name=file_name,
            mime_type=normalize_mime_type(mime_type),
            file_size_bytes=len(data),
            uploaded_at=utc_now_iso(),
            description=description,
        )

        violations = self.policy.validate(metadata)
        if violations:
            raise ValidationFailedError(violations, details={"file_name": file_name})

        self.records.insert_pair(content, metadata, cancel=cancel)
        return metadata.image_id

    def get_metadata(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> ImageMetadata | None:
        raise_if_cancelled(cancel, operation="get_metadata", details={"image_id": image_id})
        return self.records.get_metadata_by_id(image_id)

    def get_content(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bytes | None:
        raise_if_cancelled(cancel, operation="get_content", details={"image_id": image_id})
        return self.records.get_content_by_metadata_id(image_id)

    def get_full(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> tuple[ImageMetadata | None, bytes | None]:
        """Return metadata and content for one image; content is skipped when metadata is missing."""
        metadata = self.get_metadata(image_id, cancel=cancel)
        if metadata is None:
            return None, None

        return metadata, self.get_content(image_id, cancel=cancel)

    def update_description(
        self,
        image_id: str,
        description: str | None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        """Change the description of an existing image.

        A None description leaves the stored value as it is. The whole
        record is re-validated, not just the changed field.

        Returns:
            False if the image does not exist

        Raises:
            ValidationFailedError: If the updated record is invalid
        """
        raise_if_cancelled(cancel, operation="update", details={"image_id": image_id})

        metadata = self.records.get_metadata_by_id(image_id)
        if metadata is None:
            return False

        if description is not None:
            metadata.description = description

        violations = self.policy.validate(metadata)
        if violations:
            raise ValidationFailedError(violations, details={"image_id": image_id})

        return self.records.update_metadata_description(
            image_id,
            metadata.description,
            cancel=cancel,
        )

    def delete(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        """Delete an image and its content together; False if absent."""
        return self.records.delete_by_metadata_id(image_id, cancel=cancel)

    def list_metadata(
        self,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
        mime_type_filter: str | None = None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> tuple[list[ImageMetadata], int]:
        """Return one page of metadata, newest first, and the matching total."""
        raise_if_cancelled(cancel, operation="list")
        page, page_size = PagePagination.clamp(page, page_size)
        return self.records.list_metadata(page, page_size, mime_type_filter)
