from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
)


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Image ID to retrieve",
    )

    content: StrictBool = Field(
        default=False,
        description=(
            "If true, returns the image bytes with metadata in the "
            "X-Image-Metadata header. If false, returns metadata JSON."
        ),
    )

    @field_validator("image_id")
    @classmethod
    def validate_image_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("image_id must not be blank")
        return value


class ImageMetadataHeader(BaseModel):
    """Compact metadata sent alongside binary content."""

    image_id: str
    original_file_name: str
    mime_type: str
    file_size_bytes: int
    uploaded_at: str
    description: str | None = None
