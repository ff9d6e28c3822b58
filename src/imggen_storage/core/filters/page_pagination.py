"""
Page-number pagination utilities.
"""

from typing import TypeVar

from imggen_storage.core.models.pagination import PageInfo
from imggen_storage.core.utils.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
)

T = TypeVar("T")


class PagePagination:
    """
    Page-number pagination helper.

    Pages are 1-based. Out-of-range requests are never rejected; they are
    clamped into range instead:

    - page below 1 becomes 1
    - page_size below MIN_PAGE_SIZE becomes MIN_PAGE_SIZE
    - page_size above MAX_PAGE_SIZE becomes MAX_PAGE_SIZE

    Typical usage:
    1. Clamp the requested page and page size
    2. Apply pagination to an ordered list of items
    3. Build PageInfo for the response
    """

    @staticmethod
    def clamp(
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[int, int]:
        """
        Clamp pagination parameters into their valid ranges.

        Example:
            clamp(page=0, page_size=500)
            → (1, 100)
        """
        page = max(page, DEFAULT_PAGE)
        page_size = min(max(page_size, MIN_PAGE_SIZE), MAX_PAGE_SIZE)
        return page, page_size

    @staticmethod
    def offset(page: int, page_size: int) -> int:
        """Number of items preceding the given (already clamped) page."""
        return (page - 1) * page_size

    @classmethod
    def paginate(
        cls,
        items: list[T],
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[T], int]:
        """
        Slice one page out of an ordered list.

        Args:
            items: Full, already ordered list of items
            page: 1-based page number
            page_size: Maximum number of items on the page

        Returns:
            A tuple containing:
            - page_items: Items for the requested page
            - total_count: Total number of items before pagination

        Example:
            items = [1, 2, 3, 4, 5]
            paginate(items, page=2, page_size=3)

            → ([4, 5], 5)
        """
        page, page_size = cls.clamp(page, page_size)
        start = cls.offset(page, page_size)
        return items[start : start + page_size], len(items)

    @classmethod
    def page_info(cls, page: int, page_size: int, total_count: int) -> PageInfo:
        """
        Generate pagination metadata for API responses.

        Notes:
            - Page numbering starts at 1
            - total_pages is rounded up and is 0 for an empty result
        """
        page, page_size = cls.clamp(page, page_size)
        total_pages = (total_count + page_size - 1) // page_size

        return PageInfo(
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_more=cls.offset(page, page_size) + page_size < total_count,
        )
