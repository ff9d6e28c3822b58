"""
Pytest configuration and fixtures for image storage tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup.
"""

import base64
import os
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("IMAGE_METADATA_TABLE_NAME", "test-image-metadata")
os.environ.setdefault("IMAGE_TYPES_TABLE_NAME", "test-image-types")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageStorage")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-storage-tests")

from imggen_storage.core.models.image import ImageContent, ImageMetadata  # noqa: E402


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_metadata_table(dynamodb_resource):
    """Helper to create the metadata table with its sparse GSIs."""
    table_name = os.getenv("IMAGE_METADATA_TABLE_NAME")

    return dynamodb_resource.create_table(
        TableName=table_name,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "record_id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "record_id", "AttributeType": "S"},
            {"AttributeName": "record_type", "AttributeType": "S"},
            {"AttributeName": "uploaded_at", "AttributeType": "S"},
            {"AttributeName": "mime_type", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "record-uploaded-index",
                "KeySchema": [
                    {"AttributeName": "record_type", "KeyType": "HASH"},
                    {"AttributeName": "uploaded_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "mime-uploaded-index",
                "KeySchema": [
                    {"AttributeName": "mime_type", "KeyType": "HASH"},
                    {"AttributeName": "uploaded_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """
    Create the metadata table for testing.

    moto discards the table when the mock context exits.
    """
    table = _create_metadata_table(dynamodb_resource)
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def image_types_table(dynamodb_resource):
    table = dynamodb_resource.create_table(
        TableName=os.getenv("IMAGE_TYPES_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "type_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "type_id", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def dynamodb_get_item(dynamodb_table) -> Callable[[str], dict[str, Any] | None]:
    """
    Helper to get a single item from DynamoDB.

    Usage:
        item = dynamodb_get_item("img_123")
    """

    def _get(record_id: str) -> dict[str, Any] | None:
        response: dict[str, Any] = dynamodb_table.get_item(Key={"record_id": record_id})
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the content bucket for testing."""
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.create_bucket(Bucket=bucket_name)
    except ClientError as e:
        if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
            raise

    return s3_client


@pytest.fixture
def s3_keys(s3_bucket) -> Callable[[], list[str]]:
    """
    Helper listing every object key in the content bucket.

    Usage:
        assert s3_keys() == ["content/cnt_1"]
    """

    def _keys() -> list[str]:
        response = s3_bucket.list_objects_v2(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"))
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\x14\r\x0c\x0b\x0b\x0c\x19\x12\x13\x0f\x14\x1d\x1a\x1f\x1e\x1d\x1a\x1c"
        b"\x1c $.' \",#\x1c\x1c(7),01444\x1f'9=82<.342\xff\xc0\x00\x0b\x08"
        b"\x00\x01\x00\x01\x01\x01\x11\x00\xff\xc4\x00\x14\x00\x01\x00\x00\x00"
        b"\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\t\xff\xc4\x00\x14\x10"
        b"\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )


@pytest.fixture
def make_metadata() -> Callable[..., ImageMetadata]:
    """
    Factory for valid ImageMetadata with overridable fields.

    Usage:
        metadata = make_metadata(image_id="img_2", mime_type="image/jpeg")
    """

    def _make(**overrides: Any) -> ImageMetadata:
        fields: dict[str, Any] = {
            "image_id": "img_1",
            "content_id": "cnt_1",
            "original_file_name": "photo.png",
            "mime_type": "image/png",
            "file_size_bytes": 4,
            "uploaded_at": "2024-01-01T10:00:00.000000+00:00",
            "description": "First image",
        }
        fields.update(overrides)
        return ImageMetadata(**fields)

    return _make


@pytest.fixture
def make_pair(make_metadata) -> Callable[..., tuple[ImageContent, ImageMetadata]]:
    """
    Factory for a matching content/metadata pair.

    Usage:
        content, metadata = make_pair("img_2", "cnt_2", data=b"abcd")
    """

    def _make(
        image_id: str = "img_1",
        content_id: str = "cnt_1",
        data: bytes = b"\x89PNG",
        **overrides: Any,
    ) -> tuple[ImageContent, ImageMetadata]:
        content = ImageContent(content_id=content_id, data=data)
        metadata = make_metadata(
            image_id=image_id,
            content_id=content_id,
            file_size_bytes=len(data),
            **overrides,
        )
        return content, metadata

    return _make
