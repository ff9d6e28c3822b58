"""Pydantic models for image type catalogue requests/responses."""

from pydantic import BaseModel, ConfigDict, Field

from imggen_storage.core.models.image_type import ImageType


class ImageTypePath(BaseModel):
    """Path parameters of the catalogue routes; both are optional."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type_id: str | None = Field(None, min_length=1, description="Image type ID")
    category_name: str | None = Field(None, min_length=1, description="Category name")


class AddCategoryRequest(BaseModel):
    """Body of POST /image-types/{type_id}/categories."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Category name")
    probability_weight: float = Field(1.0, description="Selection weight between 0 and 1")


class RenameCategoryRequest(BaseModel):
    """Body of PATCH /image-types/{type_id}/categories/{category_name}."""

    model_config = ConfigDict(str_strip_whitespace=True)

    new_name: str = Field(..., min_length=1, description="New category name")


class ImageTypeListResponse(BaseModel):
    image_types: list[ImageType]
    total_count: int


class DeleteImageTypeResponse(BaseModel):
    type_id: str = Field(..., description="Deleted image type ID")
    message: str = Field(..., description="Success message")
