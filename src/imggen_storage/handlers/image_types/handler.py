"""
Lambda handler for the image type catalogue.

Routes (API Gateway proxy integration):
    GET    /image-types
    POST   /image-types
    GET    /image-types/{type_id}
    PUT    /image-types/{type_id}
    DELETE /image-types/{type_id}
    POST   /image-types/{type_id}/categories
    PATCH  /image-types/{type_id}/categories/{category_name}
    DELETE /image-types/{type_id}/categories/{category_name}
"""

import json
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imggen_storage.core.infrastructure.aws.dynamodb_image_types import DynamoDBImageTypes
from imggen_storage.core.models.errors import ValidationFailedError
from imggen_storage.core.models.image_type import ImageType, violations_from
from imggen_storage.core.utils.constants import METRICS_NAMESPACE
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import (
    AddCategoryRequest,
    DeleteImageTypeResponse,
    ImageTypeListResponse,
    ImageTypePath,
    RenameCategoryRequest,
)

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

JsonDict = dict[str, Any]


def _parse_document(body: JsonDict, type_id: str | None = None) -> ImageType:
    """Build an ImageType from a request body; the path id wins over the body's."""
    if type_id:
        body = {**body, "type_id": type_id}
    try:
        return ImageType.model_validate(body)
    except ValidationError as exc:
        raise ValidationFailedError(
            violations_from(exc),
            message="Image type failed validation",
            details={"type_id": type_id} if type_id else None,
        ) from exc


def _type_not_found(type_id: str, request_id: str | None) -> JsonDict:
    return ResponseBuilder.not_found(f"Image type not found: {type_id}", request_id=request_id)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image type catalogue requests.

    Whole documents are created, replaced, fetched and deleted by type id;
    categories are added, renamed and removed through their owning type.
    Category operations naming a missing category leave the type as is.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    method = (event.get("httpMethod") or "GET").upper()
    resource_path = event.get("path") or ""
    logger.info(
        "Received image type request",
        extra={"http_method": method, "path": resource_path, "request_id": request_id},
    )

    path_params = event.get("pathParameters") or {}
    try:
        path = validate_request(
            ImageTypePath,
            {
                "type_id": path_params.get("type_id"),
                "category_name": path_params.get("category_name"),
            },
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    body: JsonDict = {}
    if method in ("POST", "PUT", "PATCH"):
        try:
            body = json.loads(event.get("body") or "{}")
        except json.JSONDecodeError as exc:
            logger.exception("Invalid JSON body received", exc_info=exc)
            return ResponseBuilder.bad_request("Invalid JSON body", request_id=request_id)

        if not isinstance(body, dict):
            return ResponseBuilder.bad_request("Request body must be a JSON object", request_id=request_id)

    catalogue = DynamoDBImageTypes()
    type_id = path.type_id

    try:
        if "/categories" in resource_path and type_id:
            return _handle_category(catalogue, method, type_id, path.category_name, body, request_id)

        if type_id is None:
            if method == "GET":
                image_types = catalogue.list_image_types()
                response = ImageTypeListResponse(image_types=image_types, total_count=len(image_types))
                return ResponseBuilder.ok(response.model_dump(), request_id=request_id)

            if method == "POST":
                saved = catalogue.upsert_image_type(_parse_document(body))
                metrics.add_metric(name="ImageTypesSaved", unit=MetricUnit.Count, value=1)
                return ResponseBuilder.created(saved.model_dump(), request_id=request_id)

        elif method == "GET":
            image_type = catalogue.get_image_type(type_id)
            if image_type is None:
                return _type_not_found(type_id, request_id)
            return ResponseBuilder.ok(image_type.model_dump(), request_id=request_id)

        elif method == "PUT":
            saved = catalogue.upsert_image_type(_parse_document(body, type_id))
            metrics.add_metric(name="ImageTypesSaved", unit=MetricUnit.Count, value=1)
            return ResponseBuilder.ok(saved.model_dump(), request_id=request_id)

        elif method == "DELETE":
            catalogue.delete_image_type(type_id)
            metrics.add_metric(name="ImageTypesDeleted", unit=MetricUnit.Count, value=1)
            deleted = DeleteImageTypeResponse(type_id=type_id, message="Image type deleted successfully")
            return ResponseBuilder.ok(deleted.model_dump(), request_id=request_id)

    except ValidationFailedError as exc:
        logger.warning(
            "Image type rejected by validation",
            extra={"type_id": type_id, "violations": exc.details["violations"]},
        )
        return ResponseBuilder.from_error(exc, request_id=request_id)

    return ResponseBuilder.error(
        status=HTTPStatus.METHOD_NOT_ALLOWED,
        message=f"{method} is not supported on {resource_path or 'this resource'}",
        request_id=request_id,
    )


def _handle_category(
    catalogue: DynamoDBImageTypes,
    method: str,
    type_id: str,
    category_name: str | None,
    body: JsonDict,
    request_id: str | None,
) -> JsonDict:
    if method == "POST" and category_name is None:
        try:
            request = validate_request(AddCategoryRequest, body)
        except ValidationError as exc:
            return ResponseBuilder.bad_request(
                "Invalid request payload",
                details={"errors": sanitize_validation_errors(exc.errors())},
                request_id=request_id,
            )
        updated = catalogue.add_category(type_id, request.name, request.probability_weight)

    elif method == "PATCH" and category_name:
        try:
            rename = validate_request(RenameCategoryRequest, body)
        except ValidationError as exc:
            return ResponseBuilder.bad_request(
                "Invalid request payload",
                details={"errors": sanitize_validation_errors(exc.errors())},
                request_id=request_id,
            )
        updated = catalogue.rename_category(type_id, category_name, rename.new_name)

    elif method == "DELETE" and category_name:
        updated = catalogue.remove_category(type_id, category_name)

    else:
        return ResponseBuilder.error(
            status=HTTPStatus.METHOD_NOT_ALLOWED,
            message=f"{method} is not supported on categories",
            request_id=request_id,
        )

    if updated is None:
        return _type_not_found(type_id, request_id)

    return ResponseBuilder.ok(updated.model_dump(), request_id=request_id)
