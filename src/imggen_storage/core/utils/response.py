"""
API Gateway proxy responses for the image storage handlers.

JSON bodies for metadata and errors, base64 bodies for image content, and
the mapping from domain errors onto HTTP statuses.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from imggen_storage.core.models.errors import (
    ConstraintViolationError,
    ImageServiceError,
    NotFoundError,
    OperationCancelledError,
    StorageUnavailableError,
    ValidationFailedError,
)
from imggen_storage.core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    EXPOSE_HEADERS,
    IMAGE_METADATA_HEADER,
)
from imggen_storage.core.utils.time import utc_now_iso

JsonDict = dict[str, Any]

# Most specific first: the first matching class wins
_STATUS_BY_ERROR: tuple[tuple[type[ImageServiceError], HTTPStatus], ...] = (
    (ValidationFailedError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (ConstraintViolationError, HTTPStatus.CONFLICT),
    (StorageUnavailableError, HTTPStatus.SERVICE_UNAVAILABLE),
    (OperationCancelledError, HTTPStatus.GATEWAY_TIMEOUT),
)


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    CORS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @classmethod
    def _headers(cls, content_type: str, cors_origin: str | None) -> dict[str, str]:
        headers = {"Content-Type": content_type, **cls.CORS}
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin
        return headers

    @classmethod
    def _json(
        cls,
        status: HTTPStatus,
        payload: JsonDict,
        *,
        request_id: str | None,
        cors_origin: str | None,
    ) -> JsonDict:
        if request_id:
            payload = {**payload, "request_id": request_id}

        return {
            "statusCode": status.value,
            "headers": cls._headers(DEFAULT_CONTENT_TYPE, cors_origin),
            "body": json.dumps(payload),
        }

    @classmethod
    def ok(
        cls,
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls._json(HTTPStatus.OK, body, request_id=request_id, cors_origin=cors_origin)

    @classmethod
    def created(
        cls,
        body: JsonDict,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls._json(HTTPStatus.CREATED, body, request_id=request_id, cors_origin=cors_origin)

    @classmethod
    def preflight(cls, *, cors_origin: str | None = None) -> JsonDict:
        """Empty 204 answer to a CORS preflight request."""
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": cls._headers(DEFAULT_CONTENT_TYPE, cors_origin),
            "body": "",
        }

    @classmethod
    def error(
        cls,
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return cls._json(status, payload, request_id=request_id, cors_origin=cors_origin)

    @staticmethod
    def status_for(exc: ImageServiceError) -> HTTPStatus:
        """HTTP status of a domain error (500 when unmapped)."""
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                return status
        return HTTPStatus.INTERNAL_SERVER_ERROR

    @classmethod
    def from_error(
        cls,
        exc: ImageServiceError,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Render a domain error with its code, message and details."""
        return cls.error(
            status=cls.status_for(exc),
            error=exc.error_code,
            message=exc.message,
            details=exc.details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def bad_request(
        cls,
        message: str,
        *,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            details=details,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def not_found(
        cls,
        message: str = "Resource not found",
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.NOT_FOUND,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def image_not_found(cls, image_id: str, *, request_id: str | None = None) -> JsonDict:
        return cls.not_found(f"Image not found: {image_id}", request_id=request_id)

    @classmethod
    def internal_error(
        cls,
        message: str = "Internal server error",
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return cls.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    @classmethod
    def image_content(
        cls,
        data: bytes,
        *,
        mime_type: str,
        metadata_json: str,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Base64 image body with the metadata JSON in X-Image-Metadata."""
        headers = cls._headers(mime_type, cors_origin)
        headers["Content-Length"] = str(len(data))
        headers[IMAGE_METADATA_HEADER] = metadata_json

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": headers,
            "body": base64.b64encode(data).decode("utf-8"),
            "isBase64Encoded": True,
        }
