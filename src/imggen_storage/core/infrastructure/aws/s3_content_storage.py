"""S3-backed implementation of ContentStorageRepository."""

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from imggen_storage.core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from imggen_storage.core.models.errors import StorageUnavailableError
from imggen_storage.core.repositories.storage_repository import ContentStorageRepository
from imggen_storage.core.utils.constants import (
    CONTENT_KEY_PREFIX,
    CONTENT_OBJECT_TYPE,
    ERROR_CODE_CONTENT_DELETE_FAILED,
    ERROR_CODE_CONTENT_FETCH_FAILED,
    ERROR_CODE_CONTENT_UPLOAD_FAILED,
)

logger = Logger(utc=True)

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3ContentStorage(ContentStorageRepository):
    """Content storage backed by Amazon S3.

    Each content record is one object under `content/<content_id>`. The
    object carries no image attributes; those live in the metadata record.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    @staticmethod
    def content_key(content_id: str) -> str:
        return f"{CONTENT_KEY_PREFIX}{content_id}"

    def put_content(self, *, content_id: str, data: bytes) -> str:
        """Upload content bytes to S3 and return the object key."""
        key = self.content_key(content_id)

        logger.debug(
            "Uploading image content",
            extra={"content_id": content_id, "key": key, "size": len(data)},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=CONTENT_OBJECT_TYPE,
                metadata={"content-id": content_id},
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageUnavailableError(
                message="Unable to store image content at this time",
                error_code=ERROR_CODE_CONTENT_UPLOAD_FAILED,
                details={"content_id": content_id},
            ) from exc

        logger.info("Image content uploaded", extra={"key": key})
        return key

    def fetch_content(self, *, content_id: str) -> bytes | None:
        """Download content bytes from S3; None when the object is absent."""
        key = self.content_key(content_id)
        logger.debug("Downloading image content", extra={"key": key})

        try:
            body = self._s3.read_object(key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                logger.warning("Image content not found", extra={"key": key})
                return None

            logger.error("S3 download failed", extra={"key": key})
            raise StorageUnavailableError(
                message="Unable to read image content at this time",
                error_code=ERROR_CODE_CONTENT_FETCH_FAILED,
                details={"content_id": content_id},
            ) from exc
        except BotoCoreError as exc:
            logger.error("S3 download failed", extra={"key": key})
            raise StorageUnavailableError(
                message="Unable to read image content at this time",
                error_code=ERROR_CODE_CONTENT_FETCH_FAILED,
                details={"content_id": content_id},
            ) from exc

        logger.info("Image content downloaded", extra={"key": key, "size": len(body)})
        return body

    def remove_content(self, *, content_id: str) -> None:
        """Delete a content object from S3."""
        key = self.content_key(content_id)
        logger.debug("Deleting image content", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageUnavailableError(
                message="Unable to delete image content at this time",
                error_code=ERROR_CODE_CONTENT_DELETE_FAILED,
                details={"content_id": content_id},
            ) from exc

        logger.info("Image content deleted", extra={"key": key})
