"""ImageRecordStore over S3 (content) and DynamoDB (metadata)."""

from aws_lambda_powertools import Logger

from imggen_storage.core.filters.mime_type_filter import MimeTypeFilter
from imggen_storage.core.filters.page_pagination import PagePagination
from imggen_storage.core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from imggen_storage.core.infrastructure.aws.s3_content_storage import S3ContentStorage
from imggen_storage.core.models.errors import ImageServiceError
from imggen_storage.core.models.image import ImageContent, ImageMetadata
from imggen_storage.core.repositories.metadata_repository import MetadataRepository
from imggen_storage.core.repositories.record_store import ImageRecordStore
from imggen_storage.core.repositories.storage_repository import ContentStorageRepository
from imggen_storage.core.utils.cancellation import CancellationSignal, raise_if_cancelled

logger = Logger(utc=True)


class AwsImageRecordStore(ImageRecordStore):
    """Paired content/metadata storage across S3 and DynamoDB.

    S3 and DynamoDB share no transaction, so pair writes use compensation:

    insert:
    1. Claim the content id with a pending guard item (conditional put);
       a taken id fails here, before S3 is touched
    2. Upload content to S3 (unreferenced, so invisible to readers)
    3. Commit metadata + guard in one DynamoDB transaction, conditional on
       the guard still naming this image
    4. On failure or cancellation before step 3, remove the S3 object and
       the pending guard, but only while this image still holds the claim.
       A guard left behind by a crash only blocks its own random id.

    delete:
    1. Commit removal of metadata + content guard in one DynamoDB transaction
    2. Remove the S3 object; a failure here leaves an unreachable object
       that is logged for cleanup, never a half-visible image
    """

    def __init__(
        self,
        content: ContentStorageRepository | None = None,
        metadata: MetadataRepository | None = None,
    ) -> None:
        self.content = content or S3ContentStorage()
        self.metadata = metadata or DynamoDBMetadata()

    def insert_pair(
        self,
        content: ImageContent,
        metadata: ImageMetadata,
        *,
        cancel: CancellationSignal | None = None,
    ) -> None:
        details = {"image_id": metadata.image_id, "content_id": content.content_id}
        raise_if_cancelled(cancel, operation="store", details=details)

        # Step 1: Claim the content id; the S3 key is derived from it
        self.metadata.claim_content(content_id=content.content_id, image_id=metadata.image_id)

        # Steps 2-3: Upload, then commit metadata together with the claim
        try:
            self.content.put_content(content_id=content.content_id, data=content.data)
            raise_if_cancelled(cancel, operation="store", details=details)
            self.metadata.create_pair(metadata=metadata)
        except Exception:
            logger.warning("Metadata commit failed, abandoning content claim", extra=details)
            self._abandon_claim(content.content_id, metadata.image_id)
            raise

        logger.info("Image pair stored", extra=details)

    def get_metadata_by_id(self, image_id: str) -> ImageMetadata | None:
        return self.metadata.fetch_metadata(image_id=image_id)

    def get_content_by_metadata_id(self, image_id: str) -> bytes | None:
        metadata = self.metadata.fetch_metadata(image_id=image_id)
        if metadata is None:
            return None

        data = self.content.fetch_content(content_id=metadata.content_id)
        if data is None:
            logger.error(
                "Metadata references missing content",
                extra={"image_id": image_id, "content_id": metadata.content_id},
            )
            return None

        if len(data) != metadata.file_size_bytes:
            logger.warning(
                "Stored content size differs from metadata",
                extra={
                    "image_id": image_id,
                    "expected": metadata.file_size_bytes,
                    "actual": len(data),
                },
            )

        return data

    def update_metadata_description(
        self,
        image_id: str,
        description: str | None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        raise_if_cancelled(cancel, operation="update", details={"image_id": image_id})
        return self.metadata.update_description(image_id=image_id, description=description)

    def delete_by_metadata_id(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        metadata = self.metadata.fetch_metadata(image_id=image_id)
        if metadata is None:
            return False

        raise_if_cancelled(cancel, operation="delete", details={"image_id": image_id})

        # Step 1: Commit; from here on the image is gone for every reader
        if not self.metadata.remove_pair(metadata=metadata):
            return False

        # Step 2: Release the content object
        self._discard_content(metadata.content_id)

        logger.info("Image pair deleted", extra={"image_id": image_id})
        return True

    def list_metadata(
        self,
        page: int,
        page_size: int,
        mime_type_filter: str | None = None,
    ) -> tuple[list[ImageMetadata], int]:
        page, page_size = PagePagination.clamp(page, page_size)
        records = self.metadata.query_metadata(mime_type=MimeTypeFilter.normalize(mime_type_filter))
        return PagePagination.paginate(records, page, page_size)

    def _discard_content(self, content_id: str) -> None:
        """Best-effort content removal; failures leave an orphan, not an error."""
        try:
            self.content.remove_content(content_id=content_id)
        except ImageServiceError:
            logger.warning(
                "Failed to remove image content, object is orphaned",
                extra={"content_id": content_id},
            )

    def _abandon_claim(self, content_id: str, image_id: str) -> None:
        """Undo a failed insert, touching content only while this image holds the claim."""
        details = {"image_id": image_id, "content_id": content_id}
        try:
            if self.metadata.content_owner(content_id=content_id) != image_id:
                logger.warning("Content claim not held, leaving content in place", extra=details)
                return

            self._discard_content(content_id)
            self.metadata.release_content(content_id=content_id, image_id=image_id)
        except ImageServiceError:
            logger.warning("Failed to abandon content claim", extra=details)
