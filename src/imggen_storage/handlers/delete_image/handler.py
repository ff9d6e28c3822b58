"""
Lambda handler responsible for deleting an image resource.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imggen_storage.core.services.image_storage_service import ImageStorageService
from imggen_storage.core.utils.cancellation import LambdaDeadline
from imggen_storage.core.utils.constants import METRICS_NAMESPACE
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.time import utc_now_iso
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteImageRequest, DeleteImageResponse

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the image identifier from API Gateway path parameters
    - Validates the incoming request payload
    - Deletes metadata and content together through the storage service

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            DeleteImageRequest,
            {"image_id": path_params.get("image_id")},
        )
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = ImageStorageService()

    if not service.delete(request.image_id, cancel=LambdaDeadline(context)):
        logger.info("Image to delete not found", extra={"image_id": request.image_id})
        return ResponseBuilder.image_not_found(request.image_id, request_id=request_id)

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    response = DeleteImageResponse(
        image_id=request.image_id,
        message="Image deleted successfully",
        deleted_at=utc_now_iso(),
    )

    return ResponseBuilder.ok(response.model_dump(), request_id=request_id)
