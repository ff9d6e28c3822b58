"""
Lambda handler responsible for updating an image description.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imggen_storage.core.models.errors import ValidationFailedError
from imggen_storage.core.services.image_storage_service import ImageStorageService
from imggen_storage.core.utils.cancellation import LambdaDeadline
from imggen_storage.core.utils.constants import METRICS_NAMESPACE
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import UpdateImageRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image description updates (PATCH).

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with the updated metadata
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image update request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request("Invalid JSON body", request_id=request_id)

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request("Request body must be a JSON object", request_id=request_id)

    try:
        request = validate_request(
            UpdateImageRequest,
            {"image_id": path_params.get("image_id"), "description": body.get("description")},
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = ImageStorageService()

    try:
        updated = service.update_description(
            request.image_id,
            request.description,
            cancel=LambdaDeadline(context),
        )
    except ValidationFailedError as exc:
        logger.warning(
            "Update rejected by validation policy",
            extra={"image_id": request.image_id, "violations": exc.details["violations"]},
        )
        return ResponseBuilder.from_error(exc, request_id=request_id)

    if not updated:
        logger.info("Image to update not found", extra={"image_id": request.image_id})
        return ResponseBuilder.image_not_found(request.image_id, request_id=request_id)

    metadata = service.get_metadata(request.image_id)
    if metadata is None:
        return ResponseBuilder.image_not_found(request.image_id, request_id=request_id)

    return ResponseBuilder.ok(metadata.model_dump(), request_id=request_id)
