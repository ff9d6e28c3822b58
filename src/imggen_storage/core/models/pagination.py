"""Pagination model."""

from pydantic import BaseModel, Field, StrictBool, StrictInt


class PageInfo(BaseModel):
    """Page-number pagination metadata for list responses."""

    page: StrictInt = Field(..., description="1-based page number that was served")
    page_size: StrictInt = Field(..., description="Maximum number of items per page")
    total_count: StrictInt = Field(..., description="Total number of matching items")
    total_pages: StrictInt = Field(..., description="Number of pages available")
    has_more: StrictBool = Field(..., description="Whether pages exist after this one")
