"""Pydantic models for update image request/response."""

from pydantic import BaseModel, ConfigDict, Field


class UpdateImageRequest(BaseModel):
    """Validation model for update image request.

    A missing or null description leaves the stored description unchanged.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: str = Field(
        ...,
        min_length=1,
        description="Image ID to update",
    )
    description: str | None = Field(None, description="New image description")
