import base64
import json
from http import HTTPStatus

import pytest

from imggen_storage.core.models.errors import (
    ConstraintViolationError,
    ImageServiceError,
    NotFoundError,
    OperationCancelledError,
    StorageUnavailableError,
    ValidationFailedError,
)
from imggen_storage.core.models.image import Violation
from imggen_storage.core.utils.response import ResponseBuilder


class TestResponseBuilder:
    def test_ok_includes_body_request_id_and_cors(self) -> None:
        response = ResponseBuilder.ok({"a": 1}, request_id="req-1")

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {"a": 1, "request_id": "req-1"}
        assert response["headers"]["Content-Type"] == "application/json"
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        assert "PATCH" in response["headers"]["Access-Control-Allow-Methods"]

    def test_created(self) -> None:
        assert ResponseBuilder.created({"image_id": "img_1"})["statusCode"] == 201

    def test_cors_origin_override(self) -> None:
        response = ResponseBuilder.ok({}, cors_origin="https://app.example")

        assert response["headers"]["Access-Control-Allow-Origin"] == "https://app.example"

    def test_error_payload(self) -> None:
        response = ResponseBuilder.error(
            status=HTTPStatus.CONFLICT,
            error="CONSTRAINT_VIOLATION",
            message="taken",
            details={"content_id": "cnt_1"},
        )
        body = json.loads(response["body"])

        assert response["statusCode"] == 409
        assert body["error"] == "CONSTRAINT_VIOLATION"
        assert body["message"] == "taken"
        assert body["details"] == {"content_id": "cnt_1"}
        assert "timestamp" in body

    def test_error_defaults_to_status_name(self) -> None:
        body = json.loads(ResponseBuilder.not_found("gone")["body"])

        assert body["error"] == "NOT_FOUND"

    def test_from_error_renders_domain_error(self) -> None:
        exc = ValidationFailedError([Violation(field="mime_type", message="x")])

        response = ResponseBuilder.from_error(exc, request_id="req-1", cors_origin="https://app.example")
        body = json.loads(response["body"])

        assert response["statusCode"] == 422
        assert response["headers"]["Access-Control-Allow-Origin"] == "https://app.example"
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["violations"] == [{"field": "mime_type", "message": "x"}]
        assert body["request_id"] == "req-1"

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (ValidationFailedError([Violation(field="mime_type", message="bad")]), 422),
            (NotFoundError(message="missing"), 404),
            (ConstraintViolationError(message="taken"), 409),
            (StorageUnavailableError(message="down"), 503),
            (OperationCancelledError(), 504),
            (ImageServiceError(message="other", error_code="INTERNAL_ERROR"), 500),
        ],
    )
    def test_status_for_domain_errors(self, exc, status) -> None:
        assert ResponseBuilder.status_for(exc) == status
        assert ResponseBuilder.from_error(exc)["statusCode"] == status

    def test_image_not_found(self) -> None:
        body = json.loads(ResponseBuilder.image_not_found("img_1")["body"])

        assert body["message"] == "Image not found: img_1"

    def test_internal_error(self) -> None:
        assert ResponseBuilder.internal_error()["statusCode"] == 500

    def test_preflight(self) -> None:
        response = ResponseBuilder.preflight()

        assert response["statusCode"] == 204
        assert response["body"] == ""

    def test_image_content(self) -> None:
        response = ResponseBuilder.image_content(
            b"\x89PNG",
            mime_type="image/png",
            metadata_json="{}",
        )

        assert response["isBase64Encoded"] is True
        assert base64.b64decode(response["body"]) == b"\x89PNG"
        assert response["headers"]["Content-Type"] == "image/png"
        assert response["headers"]["Content-Length"] == "4"
        assert response["headers"]["X-Image-Metadata"] == "{}"
        assert "X-Image-Metadata" in response["headers"]["Access-Control-Expose-Headers"]
