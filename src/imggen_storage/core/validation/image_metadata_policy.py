"""Validation rules for image metadata records."""

from imggen_storage.core.models.image import ImageMetadata, Violation
from imggen_storage.core.utils.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_FILE_NAME_LENGTH,
    MAX_FILE_SIZE,
    SUPPORTED_MIME_TYPES,
    get_max_file_size_mb,
)
from imggen_storage.core.utils.mime import normalize_mime_type


class ImageMetadataPolicy:
    """Side-effect free rule set for ImageMetadata.

    Every rule is evaluated independently and all violations are collected.
    An empty result means the record is valid.
    """

    def validate(self, metadata: ImageMetadata) -> list[Violation]:
        violations: list[Violation] = []

        if not metadata.content_id or not metadata.content_id.strip():
            violations.append(Violation(field="content_id", message="Content id is required."))

        violations.extend(self._check_file_name(metadata.original_file_name))
        violations.extend(self._check_mime_type(metadata.mime_type))
        violations.extend(self._check_file_size(metadata.file_size_bytes))

        if metadata.description is not None and len(metadata.description) > MAX_DESCRIPTION_LENGTH:
            violations.append(
                Violation(
                    field="description",
                    message=f"Description must not exceed {MAX_DESCRIPTION_LENGTH} characters.",
                )
            )

        return violations

    @staticmethod
    def _check_file_name(file_name: str) -> list[Violation]:
        if not file_name or not file_name.strip():
            return [Violation(field="original_file_name", message="Original file name is required.")]

        if len(file_name) > MAX_FILE_NAME_LENGTH:
            return [
                Violation(
                    field="original_file_name",
                    message=f"File name must not exceed {MAX_FILE_NAME_LENGTH} characters.",
                )
            ]

        return []

    @staticmethod
    def _check_mime_type(mime_type: str) -> list[Violation]:
        normalized = normalize_mime_type(mime_type)

        if not normalized:
            return [Violation(field="mime_type", message="MIME type is required.")]

        if normalized not in SUPPORTED_MIME_TYPES:
            return [
                Violation(
                    field="mime_type",
                    message=f"MIME type must be one of: {', '.join(sorted(SUPPORTED_MIME_TYPES))}",
                )
            ]

        return []

    @staticmethod
    def _check_file_size(file_size_bytes: int) -> list[Violation]:
        if file_size_bytes <= 0:
            return [Violation(field="file_size_bytes", message="File size must be greater than 0.")]

        if file_size_bytes > MAX_FILE_SIZE:
            return [
                Violation(
                    field="file_size_bytes",
                    message=f"File size must not exceed {get_max_file_size_mb()}MB.",
                )
            ]

        return []
