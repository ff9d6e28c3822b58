"""Image type catalogue models.

An image type groups weighted categories, and each category holds the
image assets that can be layered into a generated image.
"""

import uuid

from pydantic import BaseModel, Field, ValidationError, field_validator

from imggen_storage.core.models.image import Violation
from imggen_storage.core.utils.constants import (
    MAX_CATEGORY_DESCRIPTION_LENGTH,
    MAX_CATEGORY_NAME_LENGTH,
    MAX_IMAGE_TYPE_DESCRIPTION_LENGTH,
    MAX_IMAGE_TYPE_NAME_LENGTH,
    MAX_PROBABILITY_WEIGHT,
    MIN_PROBABILITY_WEIGHT,
)
from imggen_storage.core.utils.time import utc_now_iso


def new_catalogue_id() -> str:
    return uuid.uuid4().hex


def _require_text(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValueError(message)
    return value


class ImageAsset(BaseModel):
    """A single layer image belonging to a category."""

    asset_id: str = Field(default_factory=new_catalogue_id)
    file_path: str | None = Field(None, validate_default=True)
    name: str | None = Field(None, validate_default=True)
    description: str | None = None
    created_at: str = Field(default_factory=utc_now_iso)

    @field_validator("file_path")
    @classmethod
    def file_path_required(cls, value: str | None) -> str:
        return _require_text(value, "File path is required.")

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str | None) -> str:
        return _require_text(value, "Name is required.")


class ImageCategory(BaseModel):
    """Weighted group of assets within an image type."""

    category_id: str = Field(default_factory=new_catalogue_id)
    name: str = Field(..., max_length=MAX_CATEGORY_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_CATEGORY_DESCRIPTION_LENGTH)
    probability_weight: float = Field(
        1.0,
        ge=MIN_PROBABILITY_WEIGHT,
        le=MAX_PROBABILITY_WEIGHT,
    )
    insertion_order: int = 0
    assets: list[ImageAsset] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _require_text(value, "Name is required.")


class ImageType(BaseModel):
    """Catalogue entry describing how an image is assembled."""

    type_id: str = Field(default_factory=new_catalogue_id)
    name: str = Field(..., max_length=MAX_IMAGE_TYPE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_IMAGE_TYPE_DESCRIPTION_LENGTH)
    categories: list[ImageCategory] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _require_text(value, "ImageType name is required.")

    @field_validator("categories")
    @classmethod
    def category_names_unique(cls, value: list[ImageCategory]) -> list[ImageCategory]:
        names = [category.name.strip().lower() for category in value]
        if len(set(names)) != len(names):
            raise ValueError("Category names must be unique within the ImageType (case-insensitive).")
        return value

    def find_category(self, name: str) -> ImageCategory | None:
        """Case-insensitive lookup by category name."""
        wanted = name.strip().lower()
        for category in self.categories:
            if category.name.strip().lower() == wanted:
                return category
        return None


def violations_from(exc: ValidationError) -> list[Violation]:
    """Flatten a pydantic ValidationError into field violations."""
    return [
        Violation(
            field=".".join(str(part) for part in err.get("loc", ())) or "document",
            message=str(err.get("msg", "Invalid value")).replace("Value error,", "").strip(),
        )
        for err in exc.errors()
    ]
