"""Process-local ImageRecordStore for tests and local runs."""

import threading

from aws_lambda_powertools import Logger

from imggen_storage.core.filters.mime_type_filter import MimeTypeFilter
from imggen_storage.core.filters.page_pagination import PagePagination
from imggen_storage.core.models.errors import ConstraintViolationError
from imggen_storage.core.models.image import ImageContent, ImageMetadata
from imggen_storage.core.repositories.record_store import ImageRecordStore
from imggen_storage.core.utils.cancellation import CancellationSignal, raise_if_cancelled

logger = Logger(utc=True)


class InMemoryImageRecordStore(ImageRecordStore):
    """Dictionary-backed store with the same atomicity contract as AWS.

    A single lock covers both dictionaries, so a pair write or delete is
    never observed half-done. Constraints are checked before anything is
    mutated, which makes every write all-or-nothing.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._contents: dict[str, bytes] = {}
        self._metadata: dict[str, ImageMetadata] = {}
        self._content_owner: dict[str, str] = {}

    def insert_pair(
        self,
        content: ImageContent,
        metadata: ImageMetadata,
        *,
        cancel: CancellationSignal | None = None,
    ) -> None:
        details = {"image_id": metadata.image_id, "content_id": content.content_id}

        with self._lock:
            raise_if_cancelled(cancel, operation="store", details=details)

            if metadata.content_id != content.content_id:
                raise ConstraintViolationError(
                    message="Metadata must reference the content stored with it",
                    details=details,
                )

            if (
                metadata.image_id in self._metadata
                or content.content_id in self._content_owner
                or content.content_id in self._contents
            ):
                raise ConstraintViolationError(
                    message="Image or content is already registered",
                    details=details,
                )

            self._contents[content.content_id] = bytes(content.data)
            self._metadata[metadata.image_id] = metadata.model_copy()
            self._content_owner[content.content_id] = metadata.image_id

        logger.debug("Image pair stored in memory", extra=details)

    def get_metadata_by_id(self, image_id: str) -> ImageMetadata | None:
        with self._lock:
            metadata = self._metadata.get(image_id)
            return metadata.model_copy() if metadata is not None else None

    def get_content_by_metadata_id(self, image_id: str) -> bytes | None:
        with self._lock:
            metadata = self._metadata.get(image_id)
            if metadata is None:
                return None
            return self._contents.get(metadata.content_id)

    def update_metadata_description(
        self,
        image_id: str,
        description: str | None,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        with self._lock:
            metadata = self._metadata.get(image_id)
            if metadata is None:
                return False

            raise_if_cancelled(cancel, operation="update", details={"image_id": image_id})
            self._metadata[image_id] = metadata.model_copy(update={"description": description})
            return True

    def delete_by_metadata_id(
        self,
        image_id: str,
        *,
        cancel: CancellationSignal | None = None,
    ) -> bool:
        with self._lock:
            metadata = self._metadata.get(image_id)
            if metadata is None:
                return False

            raise_if_cancelled(cancel, operation="delete", details={"image_id": image_id})
            del self._metadata[image_id]
            self._content_owner.pop(metadata.content_id, None)
            self._contents.pop(metadata.content_id, None)
            return True

    def list_metadata(
        self,
        page: int,
        page_size: int,
        mime_type_filter: str | None = None,
    ) -> tuple[list[ImageMetadata], int]:
        with self._lock:
            records = [metadata.model_copy() for metadata in self._metadata.values()]

        records = MimeTypeFilter.apply(records, mime_type_filter)
        records.sort(key=lambda metadata: metadata.uploaded_at, reverse=True)
        return PagePagination.paginate(records, page, page_size)

    def __len__(self) -> int:
        with self._lock:
            return len(self._metadata)

    @property
    def content_count(self) -> int:
        with self._lock:
            return len(self._contents)
