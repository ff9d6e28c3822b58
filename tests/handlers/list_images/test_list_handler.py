import itertools
import json

import pytest

from imggen_storage.handlers.list_images.handler import handler


def list_event(**query: str) -> dict:
    return {"httpMethod": "GET", "path": "/images", "queryStringParameters": query or None}


@pytest.fixture
def five_images(storage, sample_image_binary, sample_jpeg_binary, monkeypatch) -> list[str]:
    ticks = itertools.count()
    monkeypatch.setattr(
        "imggen_storage.core.services.image_storage_service.utc_now_iso",
        lambda: f"2024-01-01T10:00:{next(ticks):02d}.000000+00:00",
    )
    uploads = [
        (sample_image_binary, "a.png", "image/png"),
        (sample_jpeg_binary, "b.jpg", "image/jpeg"),
        (sample_image_binary, "c.png", "image/png"),
        (sample_jpeg_binary, "d.jpg", "image/jpeg"),
        (sample_image_binary, "e.png", "image/png"),
    ]
    return [storage.store(data, name, mime) for data, name, mime in uploads]


class TestListImagesHandler:
    def test_defaults(self, lambda_context, five_images) -> None:
        response = handler(list_event(), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["total_count"] == 5
        assert body["returned_count"] == 5
        assert [image["image_id"] for image in body["images"]] == list(reversed(five_images))
        assert body["pagination"] == {
            "page": 1,
            "page_size": 20,
            "total_count": 5,
            "total_pages": 1,
            "has_more": False,
        }

    def test_pages(self, lambda_context, five_images) -> None:
        first = json.loads(handler(list_event(page="1", page_size="3"), lambda_context)["body"])
        second = json.loads(handler(list_event(page="2", page_size="3"), lambda_context)["body"])

        assert first["returned_count"] == 3
        assert first["pagination"]["has_more"] is True
        assert first["pagination"]["total_pages"] == 2
        assert second["returned_count"] == 2
        assert second["pagination"]["has_more"] is False

    def test_out_of_range_values_are_clamped(self, lambda_context, five_images) -> None:
        body = json.loads(handler(list_event(page="0", page_size="1000"), lambda_context)["body"])

        assert body["pagination"]["page"] == 1
        assert body["pagination"]["page_size"] == 100
        assert body["returned_count"] == 5

    def test_page_past_the_end(self, lambda_context, five_images) -> None:
        body = json.loads(handler(list_event(page="9", page_size="3"), lambda_context)["body"])

        assert body["images"] == []
        assert body["total_count"] == 5

    def test_mime_filter(self, lambda_context, five_images) -> None:
        body = json.loads(handler(list_event(mime_type="IMAGE/JPEG"), lambda_context)["body"])

        assert body["total_count"] == 2
        assert {image["mime_type"] for image in body["images"]} == {"image/jpeg"}

    def test_empty(self, lambda_context, storage) -> None:
        body = json.loads(handler(list_event(), lambda_context)["body"])

        assert body["images"] == []
        assert body["pagination"]["total_pages"] == 0

    def test_non_numeric_page(self, lambda_context) -> None:
        response = handler(list_event(page="abc"), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["details"]["errors"][0]["field"] == "page"
