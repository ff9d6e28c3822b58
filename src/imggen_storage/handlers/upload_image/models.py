"""Pydantic models for image upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from imggen_storage.core.utils.constants import MAX_FILE_SIZE, get_max_file_size_mb

logger = Logger(utc=True)


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request.

    Only the transport is checked here (the file must be decodable and
    within the size ceiling). Metadata rules such as the MIME whitelist are
    applied by the storage service so that they are reported together.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    file_name: str = Field(..., description="Original file name")
    mime_type: str | None = Field(
        None,
        description="MIME type; detected from the file signature when omitted",
    )
    description: str | None = Field(None, description="Image description")

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_FILE_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if len(file_data) > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(f"File size exceeds {get_max_file_size_mb()}MB limit")

        return value

    def decoded_file(self) -> bytes:
        return base64.b64decode(self.file, validate=True)


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    image_id: str = Field(..., description="Unique image ID")
    content_id: str = Field(..., description="Identifier of the stored content")
    original_file_name: str = Field(..., description="Original file name")
    mime_type: str = Field(..., description="Stored MIME type")
    file_size_bytes: int = Field(..., description="Stored content size in bytes")
    uploaded_at: str = Field(..., description="Upload timestamp")
    description: str | None = Field(None, description="Image description")
    message: str = Field(..., description="Success message")
