"""DynamoDB-backed implementation of MetadataRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from imggen_storage.core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from imggen_storage.core.models.errors import (
    ConstraintViolationError,
    StorageUnavailableError,
)
from imggen_storage.core.models.image import ImageMetadata
from imggen_storage.core.repositories.metadata_repository import MetadataRepository
from imggen_storage.core.utils.constants import (
    CLAIM_COMMITTED,
    CLAIM_PENDING,
    CLAIM_STATE_KEY,
    CONTENT_GUARD_PREFIX,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_METADATA_UPDATE_FAILED,
    MIME_UPLOADED_INDEX,
    RECORD_ID_KEY,
    RECORD_TYPE_CONTENT_REF,
    RECORD_TYPE_METADATA,
    RECORD_UPLOADED_INDEX,
)

logger = Logger(utc=True)

_RECORD_ABSENT = f"attribute_not_exists({RECORD_ID_KEY})"
_RECORD_PRESENT = f"attribute_exists({RECORD_ID_KEY})"


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _is_conditional_failure(exc: ClientError) -> bool:
    """True when a write (plain or transactional) failed on its condition."""
    code = _error_code(exc)
    if code == "ConditionalCheckFailedException":
        return True

    if code != "TransactionCanceledException":
        return False

    reasons = exc.response.get("CancellationReasons") or []
    if any(reason.get("Code") == "ConditionalCheckFailed" for reason in reasons):
        return True

    # Some endpoints only report the reasons in the message text
    return "ConditionalCheckFailed" in str(exc.response.get("Error", {}).get("Message", ""))


class DynamoDBMetadata(MetadataRepository):
    """DynamoDB-backed metadata storage with error handling.

    Layout (single table, partition key `record_id`):
    - metadata item: record_id=<image_id>, record_type="metadata"
    - guard item:    record_id="content#<content_id>", record_type="content_ref",
                     image_id=<owner>, claim_state="pending"|"committed"

    The guard item is what makes content ids unique. It is claimed
    (pending) before any content is written, committed in the same
    transaction as the metadata item, and removed in the same transaction
    as that item on delete.
    All boto3 errors are caught and translated into domain-specific
    errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    @staticmethod
    def guard_key(content_id: str) -> dict[str, str]:
        return {RECORD_ID_KEY: f"{CONTENT_GUARD_PREFIX}{content_id}"}

    def claim_content(self, *, content_id: str, image_id: str) -> None:
        """Write a pending guard item unless the content id is already claimed.

        Raises:
            ConstraintViolationError: If another image holds the content id
            StorageUnavailableError: If the write fails
        """
        guard_item = {
            **self.guard_key(content_id),
            "record_type": RECORD_TYPE_CONTENT_REF,
            "image_id": image_id,
            CLAIM_STATE_KEY: CLAIM_PENDING,
        }

        try:
            self._db.put_item(item=guard_item, condition_expression=_RECORD_ABSENT)
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.warning(
                    "Content id already claimed",
                    extra={"image_id": image_id, "content_id": content_id},
                )
                raise ConstraintViolationError(
                    message="Content is already referenced by another image",
                    details={"image_id": image_id, "content_id": content_id},
                ) from exc

            logger.error(
                "DynamoDB put_item failed",
                extra={"content_id": content_id, "error_code": _error_code(exc)},
            )
            raise StorageUnavailableError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id, "content_id": content_id},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("DynamoDB unreachable while claiming content")
            raise StorageUnavailableError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id, "content_id": content_id},
            ) from exc

        logger.debug("Content id claimed", extra={"image_id": image_id, "content_id": content_id})

    def content_owner(self, *, content_id: str) -> str | None:
        """Read the guard item with a strongly consistent read."""
        try:
            response = self._db.get_item(key=self.guard_key(content_id), consistent_read=True)
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"content_id": content_id})
            raise StorageUnavailableError(
                message="Unable to check image content ownership",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"content_id": content_id},
            ) from exc

        item = response.get("Item") or {}
        owner = item.get("image_id")
        return str(owner) if owner is not None else None

    def release_content(self, *, content_id: str, image_id: str) -> bool:
        """Delete a pending guard item held by `image_id`."""
        try:
            self._db.delete_item(
                key=self.guard_key(content_id),
                ConditionExpression=f"image_id = :image_id AND {CLAIM_STATE_KEY} = :pending",
                ExpressionAttributeValues={":image_id": image_id, ":pending": CLAIM_PENDING},
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.info(
                    "Content claim not held, leaving it in place",
                    extra={"image_id": image_id, "content_id": content_id},
                )
                return False

            logger.error("DynamoDB delete_item failed", extra={"content_id": content_id})
            raise StorageUnavailableError(
                message="Unable to release image content claim",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id, "content_id": content_id},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("DynamoDB unreachable while releasing content claim")
            raise StorageUnavailableError(
                message="Unable to release image content claim",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id, "content_id": content_id},
            ) from exc

        return True

    def create_pair(self, *, metadata: ImageMetadata) -> None:
        """Create the metadata item and commit its content claim in one transaction.

        Raises:
            ConstraintViolationError: If the image id is taken or the claim is not held
            StorageUnavailableError: If creation fails
        """
        image_id = metadata.image_id
        content_id = metadata.content_id

        logger.debug(
            "Creating metadata",
            extra={"image_id": image_id, "content_id": content_id},
        )

        try:
            self._db.transact_write_items(
                transact_items=[
                    {"Put": {"Item": metadata.to_item(), "ConditionExpression": _RECORD_ABSENT}},
                    {
                        "Update": {
                            "Key": self.guard_key(content_id),
                            "UpdateExpression": f"SET {CLAIM_STATE_KEY} = :committed",
                            "ConditionExpression": "image_id = :image_id",
                            "ExpressionAttributeValues": {
                                ":committed": CLAIM_COMMITTED,
                                ":image_id": image_id,
                            },
                        }
                    },
                ]
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.warning(
                    "Metadata insert rejected by uniqueness guard",
                    extra={"image_id": image_id, "content_id": content_id},
                )
                raise ConstraintViolationError(
                    message="Image or content is already registered",
                    details={"image_id": image_id, "content_id": content_id},
                ) from exc

            logger.error(
                "DynamoDB transact_write_items failed",
                extra={"image_id": image_id, "error_code": _error_code(exc)},
            )
            raise StorageUnavailableError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("DynamoDB unreachable while creating metadata")
            raise StorageUnavailableError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info(
            "Metadata created",
            extra={"image_id": image_id, "content_id": content_id},
        )

    def fetch_metadata(self, *, image_id: str) -> ImageMetadata | None:
        """Fetch metadata for a single image.

        Raises:
            StorageUnavailableError: If fetch fails
        """
        logger.debug("Fetching metadata", extra={"image_id": image_id})

        try:
            response = self._db.get_item(key={RECORD_ID_KEY: image_id}, consistent_read=True)
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"image_id": image_id})
            raise StorageUnavailableError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id},
            ) from exc

        item = response.get("Item")
        if not item or item.get("record_type") != RECORD_TYPE_METADATA:
            return None

        return ImageMetadata.from_item(item)

    def update_description(self, *, image_id: str, description: str | None) -> bool:
        """Replace (or clear) the description of an existing metadata item.

        Raises:
            StorageUnavailableError: If the update fails
        """
        logger.debug("Updating description", extra={"image_id": image_id})

        values: dict[str, Any] = {":metadata": RECORD_TYPE_METADATA}
        if description is None:
            update_expression = "REMOVE description"
        else:
            update_expression = "SET description = :description"
            values[":description"] = description

        try:
            self._db.update_item(
                key={RECORD_ID_KEY: image_id},
                UpdateExpression=update_expression,
                ConditionExpression=f"{_RECORD_PRESENT} AND record_type = :metadata",
                ExpressionAttributeValues=values,
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.info("Metadata to update not found", extra={"image_id": image_id})
                return False

            logger.error("DynamoDB update_item failed", extra={"image_id": image_id})
            raise StorageUnavailableError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_id": image_id},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("DynamoDB unreachable while updating metadata")
            raise StorageUnavailableError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Metadata description updated", extra={"image_id": image_id})
        return True

    def remove_pair(self, *, metadata: ImageMetadata) -> bool:
        """Delete the metadata item and its content guard in one transaction.

        Raises:
            StorageUnavailableError: If deletion fails
        """
        image_id = metadata.image_id
        logger.debug("Removing metadata", extra={"image_id": image_id})

        try:
            self._db.transact_write_items(
                transact_items=[
                    {
                        "Delete": {
                            "Key": {RECORD_ID_KEY: image_id},
                            "ConditionExpression": _RECORD_PRESENT,
                        }
                    },
                    {"Delete": {"Key": self.guard_key(metadata.content_id)}},
                ]
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.info("Metadata already removed", extra={"image_id": image_id})
                return False

            logger.error(
                "DynamoDB transact_write_items failed",
                extra={"image_id": image_id, "error_code": _error_code(exc)},
            )
            raise StorageUnavailableError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("DynamoDB unreachable while removing metadata")
            raise StorageUnavailableError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id},
            ) from exc

        logger.info("Metadata removed", extra={"image_id": image_id})
        return True

    def query_metadata(self, *, mime_type: str | None = None) -> list[ImageMetadata]:
        """Return all metadata newest first, optionally for one MIME type.

        NOTE:
        - Both indexes are sparse: guard items carry neither `uploaded_at`
          nor `mime_type`, so only metadata items are returned.
        - uploaded_at must be stored in ISO-8601 UTC format.
        """
        logger.debug("Querying metadata", extra={"mime_type": mime_type})

        if mime_type:
            query_kwargs: dict[str, Any] = {
                "IndexName": MIME_UPLOADED_INDEX,
                "KeyConditionExpression": Key("mime_type").eq(mime_type),
            }
        else:
            query_kwargs = {
                "IndexName": RECORD_UPLOADED_INDEX,
                "KeyConditionExpression": Key("record_type").eq(RECORD_TYPE_METADATA),
            }
        query_kwargs["ScanIndexForward"] = False

        raw_items: list[dict[str, Any]] = []
        last_evaluated_key: dict[str, Any] | None = None

        try:
            while True:
                if last_evaluated_key:
                    query_kwargs["ExclusiveStartKey"] = last_evaluated_key

                response = self._db.query(**query_kwargs)
                raw_items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB query failed", extra={"mime_type": mime_type})
            raise StorageUnavailableError(
                message="Unable to list images",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"mime_type": mime_type},
            ) from exc

        records: list[ImageMetadata] = []
        for item in raw_items:
            try:
                records.append(ImageMetadata.from_item(item))
            except (KeyError, TypeError, ValueError, ValidationError) as exc:
                logger.warning(
                    "Skipping malformed metadata item",
                    extra={"record_id": item.get(RECORD_ID_KEY)},
                    exc_info=exc,
                )

        logger.info("Metadata queried", extra={"mime_type": mime_type, "count": len(records)})
        return records
