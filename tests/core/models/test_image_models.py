from decimal import Decimal

import pytest
from pydantic import ValidationError

from imggen_storage.core.models.image import ImageContent, ImageMetadata


class TestImageMetadata:
    def test_to_item(self, make_metadata) -> None:
        item = make_metadata().to_item()

        assert item["record_id"] == "img_1"
        assert item["record_type"] == "metadata"
        assert item["content_id"] == "cnt_1"
        assert item["description"] == "First image"

    def test_to_item_omits_absent_description(self, make_metadata) -> None:
        assert "description" not in make_metadata(description=None).to_item()

    def test_from_item_converts_decimal_size(self) -> None:
        metadata = ImageMetadata.from_item(
            {
                "record_id": "img_1",
                "record_type": "metadata",
                "content_id": "cnt_1",
                "original_file_name": "a.png",
                "mime_type": "image/png",
                "file_size_bytes": Decimal("42"),
                "uploaded_at": "2024-01-01T10:00:00.000000+00:00",
            }
        )

        assert metadata.file_size_bytes == 42
        assert metadata.description is None

    def test_item_round_trip(self, make_metadata) -> None:
        metadata = make_metadata()

        assert ImageMetadata.from_item(metadata.to_item()) == metadata

    def test_assignment_is_validated(self, make_metadata) -> None:
        metadata = make_metadata()

        with pytest.raises(ValidationError):
            metadata.file_size_bytes = "lots"


class TestImageContent:
    def test_is_frozen(self) -> None:
        content = ImageContent(content_id="cnt_1", data=b"abc")

        with pytest.raises(ValidationError):
            content.data = b"other"

    def test_repr_hides_bytes(self) -> None:
        assert "abc" not in repr(ImageContent(content_id="cnt_1", data=b"abc"))
