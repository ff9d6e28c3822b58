import json
from collections.abc import Callable
from typing import Any

import pytest

from imggen_storage.core.infrastructure.aws.dynamodb_image_types import DynamoDBImageTypes
from imggen_storage.core.models.image_type import ImageCategory, ImageType
from imggen_storage.handlers.image_types.handler import handler


@pytest.fixture
def catalogue(image_types_table) -> DynamoDBImageTypes:
    return DynamoDBImageTypes()


@pytest.fixture
def avatar(catalogue) -> ImageType:
    return catalogue.upsert_image_type(
        ImageType(
            type_id="type_1",
            name="Avatar",
            categories=[ImageCategory(name="Eyes", probability_weight=0.5)],
        )
    )


@pytest.fixture
def type_event() -> Callable[..., dict[str, Any]]:
    """
    Factory for catalogue events.

    Usage:
        event = type_event("PATCH", "type_1", "Eyes", body={"new_name": "Mouth"})
    """

    def _make(
        method: str,
        type_id: str | None = None,
        category_name: str | None = None,
        *,
        categories: bool = False,
        body: Any = None,
    ) -> dict[str, Any]:
        path = "/image-types"
        params: dict[str, str] = {}
        if type_id is not None:
            path += f"/{type_id}"
            params["type_id"] = type_id
        if categories or category_name is not None:
            path += "/categories"
        if category_name is not None:
            path += f"/{category_name}"
            params["category_name"] = category_name

        event: dict[str, Any] = {
            "httpMethod": method,
            "path": path,
            "pathParameters": params or None,
            "headers": {"x-api-key": "test-api-key"},
        }
        if body is not None:
            event["body"] = body if isinstance(body, str) else json.dumps(body)
        return event

    return _make


class TestImageTypeDocuments:
    def test_list(self, lambda_context, catalogue, avatar, type_event) -> None:
        catalogue.upsert_image_type(ImageType(type_id="type_2", name="Background"))

        response = handler(type_event("GET"), lambda_context)
        body = json.loads(response["body"])

        assert response["statusCode"] == 200
        assert body["total_count"] == 2
        assert [item["name"] for item in body["image_types"]] == ["Avatar", "Background"]

    def test_get(self, lambda_context, avatar, type_event) -> None:
        response = handler(type_event("GET", "type_1"), lambda_context)
        body = json.loads(response["body"])

        assert response["statusCode"] == 200
        assert body["name"] == "Avatar"
        assert body["categories"][0]["probability_weight"] == 0.5

    def test_get_missing(self, lambda_context, catalogue, type_event) -> None:
        response = handler(type_event("GET", "type_missing"), lambda_context)

        assert response["statusCode"] == 404
        assert "type_missing" in json.loads(response["body"])["message"]

    def test_create(self, lambda_context, catalogue, type_event) -> None:
        response = handler(
            type_event("POST", body={"name": "Portrait", "categories": [{"name": "Hair"}]}),
            lambda_context,
        )
        body = json.loads(response["body"])

        assert response["statusCode"] == 201
        assert body["type_id"]
        assert catalogue.get_image_type(body["type_id"]).categories[0].name == "Hair"

    def test_replace_uses_path_id(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(
            type_event("PUT", "type_1", body={"type_id": "other", "name": "Portrait"}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        assert catalogue.get_image_type("type_1").name == "Portrait"
        assert catalogue.get_image_type("other") is None

    def test_invalid_document_is_unprocessable(self, lambda_context, catalogue, type_event) -> None:
        response = handler(
            type_event("POST", body={"name": "Avatar", "categories": [{"name": "a"}, {"name": "A"}]}),
            lambda_context,
        )
        body = json.loads(response["body"])

        assert response["statusCode"] == 422
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["violations"][0]["field"] == "categories"

    def test_malformed_stored_document(self, lambda_context, image_types_table, type_event) -> None:
        image_types_table.put_item(Item={"type_id": "type_bad", "name": "Bad", "document": "{}"})

        response = handler(type_event("GET", "type_bad"), lambda_context)

        assert response["statusCode"] == 422
        assert json.loads(response["body"])["details"]["type_id"] == "type_bad"

    def test_delete(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(type_event("DELETE", "type_1"), lambda_context)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["type_id"] == "type_1"
        assert catalogue.get_image_type("type_1") is None

    def test_invalid_json(self, lambda_context, type_event) -> None:
        response = handler(type_event("POST", body="{not-json"), lambda_context)

        assert response["statusCode"] == 400

    def test_blank_type_id(self, lambda_context, type_event) -> None:
        response = handler(type_event("GET", "   "), lambda_context)

        assert response["statusCode"] == 400

    def test_unsupported_method(self, lambda_context, catalogue, type_event) -> None:
        assert handler(type_event("PATCH", "type_1"), lambda_context)["statusCode"] == 405


class TestCategories:
    def test_add_category(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(
            type_event("POST", "type_1", categories=True, body={"name": "Mouth", "probability_weight": 0.25}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        mouth = catalogue.get_image_type("type_1").find_category("mouth")
        assert mouth.probability_weight == 0.25
        assert mouth.insertion_order == 1

    def test_add_rejects_bad_weight(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(
            type_event("POST", "type_1", categories=True, body={"name": "Mouth", "probability_weight": 2}),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert catalogue.get_image_type("type_1").find_category("Mouth") is None

    def test_add_to_missing_type(self, lambda_context, catalogue, type_event) -> None:
        response = handler(
            type_event("POST", "type_missing", categories=True, body={"name": "Mouth"}),
            lambda_context,
        )

        assert response["statusCode"] == 404

    def test_rename_category(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(
            type_event("PATCH", "type_1", "Eyes", body={"new_name": "Glasses"}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        assert [c["name"] for c in json.loads(response["body"])["categories"]] == ["Glasses"]

    def test_rename_into_collision(self, lambda_context, catalogue, avatar, type_event) -> None:
        catalogue.add_category("type_1", "Mouth")

        response = handler(
            type_event("PATCH", "type_1", "Mouth", body={"new_name": "EYES"}),
            lambda_context,
        )

        assert response["statusCode"] == 422
        assert catalogue.get_image_type("type_1").find_category("Mouth") is not None

    def test_rename_requires_new_name(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(type_event("PATCH", "type_1", "Eyes", body={}), lambda_context)

        assert response["statusCode"] == 400

    def test_remove_category(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(type_event("DELETE", "type_1", "eyes"), lambda_context)

        assert response["statusCode"] == 200
        assert catalogue.get_image_type("type_1").categories == []

    def test_remove_missing_category_is_noop(self, lambda_context, catalogue, avatar, type_event) -> None:
        response = handler(type_event("DELETE", "type_1", "Nose"), lambda_context)

        assert response["statusCode"] == 200
        assert len(catalogue.get_image_type("type_1").categories) == 1

    def test_preflight(self, lambda_context, type_event) -> None:
        assert handler(type_event("OPTIONS", "type_1"), lambda_context)["statusCode"] == 204
