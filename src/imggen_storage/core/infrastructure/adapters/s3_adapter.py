"""Thin adapter for the image content bucket in Amazon S3."""

import os
from typing import Any, Protocol

import boto3

from imggen_storage.core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
)


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    bucket_name: str

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None: ...

    def read_object(self, *, key: str) -> bytes: ...

    def delete_object(self, *, key: str) -> None: ...


class S3Adapter:
    """Low-level S3 operations on one bucket (mechanical, no error handling).

    boto3 errors bubble up unchanged; S3ContentStorage translates them.
    """

    def __init__(self, bucket_env: str = ENV_IMAGE_S3_BUCKET_NAME) -> None:
        """Resolve the bucket from the named environment variable."""
        bucket_name = os.getenv(bucket_env)
        if not bucket_name:
            raise RuntimeError(f"{bucket_env} environment variable is not set")

        self.bucket_name = bucket_name
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        self._client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )

    def read_object(self, *, key: str) -> bytes:
        """Return the full object body.

        Raises:
            botocore.exceptions.ClientError: NoSuchKey when the key is absent
        """
        response = self._client.get_object(Bucket=self.bucket_name, Key=key)
        body: bytes = response["Body"].read()
        return body

    def delete_object(self, *, key: str) -> None:
        """Delete an object; S3 reports success for absent keys too."""
        self._client.delete_object(Bucket=self.bucket_name, Key=key)
