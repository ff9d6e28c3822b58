"""DynamoDB-backed catalogue of image types and their categories."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from imggen_storage.core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from imggen_storage.core.models.errors import StorageUnavailableError, ValidationFailedError
from imggen_storage.core.models.image_type import ImageCategory, ImageType, violations_from
from imggen_storage.core.utils.constants import (
    ENV_IMAGE_TYPES_TABLE_NAME,
    ERROR_CODE_IMAGE_TYPE_OPERATION_FAILED,
    IMAGE_TYPE_ID_KEY,
    MAX_PROBABILITY_WEIGHT,
    MIN_PROBABILITY_WEIGHT,
)

logger = Logger(utc=True)


def _require_id(type_id: str) -> None:
    if not type_id or not type_id.strip():
        raise ValueError("Id cannot be empty.")


def _require_name(name: str, message: str = "Category name is required.") -> None:
    if not name or not name.strip():
        raise ValueError(message)


def _checked(image_type: ImageType) -> ImageType:
    """Re-run model validation over a (possibly mutated) image type."""
    try:
        return ImageType.model_validate(image_type.model_dump())
    except ValidationError as exc:
        raise ValidationFailedError(
            violations_from(exc),
            message="Image type failed validation",
            details={"type_id": image_type.type_id},
        ) from exc


class DynamoDBImageTypes:
    """Image type documents stored one item per type.

    Item layout: `type_id` (partition key), `name`, and `document` holding
    the full JSON rendering of the ImageType. Categories and assets are
    only ever read and written through their owning type.

    Missing types are reported as None; category operations on a missing
    type (or a missing category) are no-ops.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_IMAGE_TYPES_TABLE_NAME)

    @staticmethod
    def _to_item(image_type: ImageType) -> dict[str, Any]:
        return {
            IMAGE_TYPE_ID_KEY: image_type.type_id,
            "name": image_type.name,
            "document": image_type.model_dump_json(),
        }

    @staticmethod
    def _from_item(item: dict[str, Any]) -> ImageType:
        return ImageType.model_validate_json(item["document"])

    def _storage_error(self, message: str, exc: Exception, **details: Any) -> StorageUnavailableError:
        logger.error(message, extra={**details, "error": str(exc)})
        return StorageUnavailableError(
            message=message,
            error_code=ERROR_CODE_IMAGE_TYPE_OPERATION_FAILED,
            details=details,
        )

    def list_image_types(self) -> list[ImageType]:
        """Return every image type, ordered by name."""
        raw_items: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self._db.scan(**scan_kwargs)
                raw_items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_evaluated_key
        except (ClientError, BotoCoreError) as exc:
            raise self._storage_error("Unable to list image types", exc) from exc

        image_types: list[ImageType] = []
        for item in raw_items:
            try:
                image_types.append(self._from_item(item))
            except (KeyError, ValidationError) as exc:
                logger.warning(
                    "Skipping malformed image type item",
                    extra={"type_id": item.get(IMAGE_TYPE_ID_KEY)},
                    exc_info=exc,
                )

        return sorted(image_types, key=lambda image_type: image_type.name.lower())

    def get_image_type(self, type_id: str) -> ImageType | None:
        _require_id(type_id)

        try:
            response = self._db.get_item(key={IMAGE_TYPE_ID_KEY: type_id}, consistent_read=True)
        except (ClientError, BotoCoreError) as exc:
            raise self._storage_error("Unable to retrieve image type", exc, type_id=type_id) from exc

        item = response.get("Item")
        if not item:
            return None

        try:
            return self._from_item(item)
        except ValidationError as exc:
            logger.error("Stored image type is malformed", extra={"type_id": type_id})
            raise ValidationFailedError(
                violations_from(exc),
                message="Stored image type is malformed",
                details={"type_id": type_id},
            ) from exc

    def upsert_image_type(self, image_type: ImageType) -> ImageType:
        """Validate and store (create or replace) an image type.

        Raises:
            ValidationFailedError: If the document breaks a catalogue rule
            StorageUnavailableError: If the write fails
        """
        image_type = _checked(image_type)

        try:
            self._db.put_item(item=self._to_item(image_type))
        except (ClientError, BotoCoreError) as exc:
            raise self._storage_error(
                "Unable to save image type", exc, type_id=image_type.type_id
            ) from exc

        logger.info(
            "Image type saved",
            extra={"type_id": image_type.type_id, "categories": len(image_type.categories)},
        )
        return image_type

    def delete_image_type(self, type_id: str) -> None:
        """Delete an image type; deleting a missing type is not an error."""
        _require_id(type_id)

        try:
            self._db.delete_item(key={IMAGE_TYPE_ID_KEY: type_id})
        except (ClientError, BotoCoreError) as exc:
            raise self._storage_error("Unable to delete image type", exc, type_id=type_id) from exc

        logger.info("Image type deleted", extra={"type_id": type_id})

    def add_category(
        self,
        type_id: str,
        name: str,
        probability_weight: float = 1.0,
    ) -> ImageType | None:
        """Append a category unless one with the same name already exists."""
        _require_id(type_id)
        _require_name(name)
        if not MIN_PROBABILITY_WEIGHT <= probability_weight <= MAX_PROBABILITY_WEIGHT:
            raise ValueError("Probability weight must be between 0 and 1.")

        image_type = self.get_image_type(type_id)
        if image_type is None:
            return None

        if image_type.find_category(name) is not None:
            return image_type

        image_type.categories.append(
            ImageCategory(
                name=name,
                probability_weight=probability_weight,
                insertion_order=len(image_type.categories),
            )
        )
        return self.upsert_image_type(image_type)

    def remove_category(self, type_id: str, name: str) -> ImageType | None:
        _require_id(type_id)
        _require_name(name)

        image_type = self.get_image_type(type_id)
        if image_type is None:
            return None

        category = image_type.find_category(name)
        if category is None:
            return image_type

        image_type.categories.remove(category)
        return self.upsert_image_type(image_type)

    def rename_category(self, type_id: str, old_name: str, new_name: str) -> ImageType | None:
        """Rename a category, keeping names unique within the type.

        Raises:
            ValidationFailedError: If the new name is too long or collides
        """
        _require_id(type_id)
        _require_name(old_name, "Old category name is required.")
        _require_name(new_name, "New category name is required.")

        image_type = self.get_image_type(type_id)
        if image_type is None:
            return None

        category = image_type.find_category(old_name)
        if category is None:
            return image_type

        category.name = new_name
        return self.upsert_image_type(image_type)
