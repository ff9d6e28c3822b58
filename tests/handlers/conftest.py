import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from imggen_storage.core.services.image_storage_service import ImageStorageService


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 30_000,
    )


@pytest.fixture
def expired_lambda_context(lambda_context):
    """Context whose invocation is about to time out."""
    lambda_context.get_remaining_time_in_millis = lambda: 10
    return lambda_context


@pytest.fixture
def storage(dynamodb_table, s3_bucket) -> ImageStorageService:
    """Storage service wired to the mocked bucket and table."""
    return ImageStorageService()


@pytest.fixture
def stored_image(storage, sample_image_binary) -> str:
    return storage.store(sample_image_binary, "test_upload.png", "image/png", "Test upload")


@pytest.fixture
def upload_image_event(sample_image_binary) -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/images",
        "body": json.dumps(
            {
                "file": base64.b64encode(sample_image_binary).decode("utf-8"),
                "file_name": "test_upload.png",
                "mime_type": "image/png",
                "description": "Test upload",
            }
        ),
        "headers": {
            "Content-Type": "application/json",
            "x-api-key": "test-api-key",
        },
    }


@pytest.fixture
def image_event() -> Callable[..., dict[str, Any]]:
    """
    Factory for events addressing a single image.

    Usage:
        event = image_event("img_1", method="PATCH", body={"description": "x"})
    """

    def _make(
        image_id: str | None,
        *,
        method: str = "GET",
        query: dict[str, str] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "httpMethod": method,
            "path": f"/images/{image_id}",
            "pathParameters": {"image_id": image_id} if image_id is not None else None,
            "queryStringParameters": query,
            "headers": {"x-api-key": "test-api-key"},
        }
        if body is not None:
            event["body"] = body if isinstance(body, str) else json.dumps(body)
        return event

    return _make
