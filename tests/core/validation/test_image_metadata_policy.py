"""Unit tests for ImageMetadataPolicy."""

import pytest

from imggen_storage.core.utils.constants import MAX_FILE_SIZE
from imggen_storage.core.validation.image_metadata_policy import ImageMetadataPolicy


@pytest.fixture
def policy() -> ImageMetadataPolicy:
    return ImageMetadataPolicy()


def fields_of(violations) -> list[str]:
    return [violation.field for violation in violations]


class TestImageMetadataPolicy:
    def test_valid_metadata_has_no_violations(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata()) == []

    def test_description_may_be_absent(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata(description=None)) == []

    @pytest.mark.parametrize("file_name", ["", "   "])
    def test_blank_file_name(self, policy, make_metadata, file_name) -> None:
        violations = policy.validate(make_metadata(original_file_name=file_name))

        assert fields_of(violations) == ["original_file_name"]
        assert violations[0].message == "Original file name is required."

    def test_file_name_length_boundary(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata(original_file_name="a" * 255)) == []

        violations = policy.validate(make_metadata(original_file_name="a" * 256))
        assert fields_of(violations) == ["original_file_name"]

    def test_blank_content_id(self, policy, make_metadata) -> None:
        violations = policy.validate(make_metadata(content_id=" "))

        assert fields_of(violations) == ["content_id"]

    def test_mime_type_is_case_insensitive(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata(mime_type="IMAGE/PNG")) == []
        assert policy.validate(make_metadata(mime_type=" image/Jpeg ")) == []

    def test_unsupported_mime_type(self, policy, make_metadata) -> None:
        violations = policy.validate(make_metadata(mime_type="application/pdf"))

        assert fields_of(violations) == ["mime_type"]
        assert violations[0].message.startswith("MIME type must be one of:")

    def test_missing_mime_type(self, policy, make_metadata) -> None:
        violations = policy.validate(make_metadata(mime_type=""))

        assert violations[0].message == "MIME type is required."

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_size(self, policy, make_metadata, size) -> None:
        violations = policy.validate(make_metadata(file_size_bytes=size))

        assert fields_of(violations) == ["file_size_bytes"]
        assert violations[0].message == "File size must be greater than 0."

    def test_size_boundary(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata(file_size_bytes=MAX_FILE_SIZE)) == []

        violations = policy.validate(make_metadata(file_size_bytes=MAX_FILE_SIZE + 1))
        assert violations[0].message == "File size must not exceed 10MB."

    def test_description_length_boundary(self, policy, make_metadata) -> None:
        assert policy.validate(make_metadata(description="d" * 1000)) == []

        violations = policy.validate(make_metadata(description="d" * 1001))
        assert fields_of(violations) == ["description"]

    def test_all_violations_are_reported_together(self, policy, make_metadata) -> None:
        metadata = make_metadata(
            content_id="",
            original_file_name="",
            mime_type="text/plain",
            file_size_bytes=0,
            description="d" * 1001,
        )

        violations = policy.validate(metadata)

        assert fields_of(violations) == [
            "content_id",
            "original_file_name",
            "mime_type",
            "file_size_bytes",
            "description",
        ]
