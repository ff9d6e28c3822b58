"""
Pydantic models for list images request.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from imggen_storage.core.utils.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE


class ListImagesRequest(BaseModel):
    """
    Validation model for list images API.

    Out-of-range page numbers and sizes are accepted here and clamped by
    the storage service; only non-numeric values are rejected.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    # Pagination
    page: int = Field(
        default=DEFAULT_PAGE,
        description="1-based page number",
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        description="Results per page (clamped to 1-100)",
    )

    # Filter
    mime_type: str | None = Field(
        None,
        description="Exact MIME type match, case-insensitive",
    )

    @field_validator("mime_type")
    @classmethod
    def blank_mime_type_is_no_filter(cls, value: str | None) -> str | None:
        return value or None
