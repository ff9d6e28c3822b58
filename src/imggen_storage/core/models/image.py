"""Shared image content and metadata models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from imggen_storage.core.models.pagination import PageInfo
from imggen_storage.core.utils.constants import RECORD_ID_KEY, RECORD_TYPE_METADATA


class Violation(BaseModel):
    """A single failed validation rule."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="Human-readable explanation")


class ImageContent(BaseModel):
    """Binary payload of a stored image."""

    model_config = ConfigDict(frozen=True)

    content_id: str = Field(..., description="Unique content identifier")
    data: bytes = Field(..., repr=False, description="Raw image bytes")


class ImageMetadata(BaseModel):
    """Descriptive attributes of a stored image.

    Field constraints are deliberately not declared here: the record is
    checked by ImageMetadataPolicy so that every violation can be reported
    at once instead of failing on the first one.
    """

    model_config = ConfigDict(validate_assignment=True)

    image_id: str = Field(..., description="Unique image identifier")
    content_id: str = Field(..., description="Identifier of the owned content record")
    original_file_name: str = Field(..., description="File name supplied at upload")
    mime_type: str = Field(..., description="Lowercased MIME type (e.g. image/png)")
    file_size_bytes: int = Field(..., description="Content length in bytes")
    uploaded_at: str = Field(..., description="ISO-8601 upload timestamp (UTC)")
    description: str | None = Field(None, description="Optional image description")

    def to_item(self) -> dict[str, Any]:
        """Render the record as a DynamoDB item."""
        item: dict[str, Any] = {
            RECORD_ID_KEY: self.image_id,
            "record_type": RECORD_TYPE_METADATA,
            "content_id": self.content_id,
            "original_file_name": self.original_file_name,
            "mime_type": self.mime_type,
            "file_size_bytes": self.file_size_bytes,
            "uploaded_at": self.uploaded_at,
        }
        if self.description is not None:
            item["description"] = self.description
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "ImageMetadata":
        """Build a record from a DynamoDB item (numbers arrive as Decimal)."""
        return cls(
            image_id=item[RECORD_ID_KEY],
            content_id=item["content_id"],
            original_file_name=item["original_file_name"],
            mime_type=item["mime_type"],
            file_size_bytes=int(item["file_size_bytes"]),
            uploaded_at=item["uploaded_at"],
            description=item.get("description"),
        )


class ListImagesResponse(BaseModel):
    """Paginated response for listing image metadata."""

    images: list[ImageMetadata] = Field(..., description="Image metadata for the requested page")
    total_count: int = Field(..., description="Total number of images matching the filter")
    returned_count: int = Field(..., description="Number of images returned in this response")
    pagination: PageInfo = Field(..., description="Pagination metadata")
