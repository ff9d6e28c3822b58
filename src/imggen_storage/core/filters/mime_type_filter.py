"""MIME-type filtering for image metadata."""

from imggen_storage.core.models.image import ImageMetadata
from imggen_storage.core.utils.mime import normalize_mime_type


class MimeTypeFilter:
    """Filter image metadata by MIME type.

    Matching is exact after lowercasing both sides. An absent or blank
    filter matches everything.
    """

    @staticmethod
    def normalize(mime_type_filter: str | None) -> str | None:
        """Return the lowercased filter, or None when no filtering applies."""
        normalized = normalize_mime_type(mime_type_filter)
        return normalized or None

    @classmethod
    def apply(
        cls,
        items: list[ImageMetadata],
        mime_type_filter: str | None,
    ) -> list[ImageMetadata]:
        wanted = cls.normalize(mime_type_filter)
        if wanted is None:
            return items

        return [item for item in items if item.mime_type.lower() == wanted]
