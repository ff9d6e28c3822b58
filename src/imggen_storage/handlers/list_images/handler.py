"""
Lambda handler responsible for listing images with optional filtering and pagination.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imggen_storage.core.filters.page_pagination import PagePagination
from imggen_storage.core.models.image import ListImagesResponse
from imggen_storage.core.services.image_storage_service import ImageStorageService
from imggen_storage.core.utils.cancellation import LambdaDeadline
from imggen_storage.core.utils.constants import METRICS_NAMESPACE
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import ListImagesRequest

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Supports:
    - Filtering by MIME type (exact, case-insensitive)
    - Page-number pagination, newest uploads first

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image list request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": request_id,
        },
    )

    params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(ListImagesRequest, params)
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    page, page_size = PagePagination.clamp(request.page, request.page_size)

    service = ImageStorageService()
    images, total_count = service.list_metadata(
        page,
        page_size,
        request.mime_type,
        cancel=LambdaDeadline(context),
    )

    response = ListImagesResponse(
        images=images,
        total_count=total_count,
        returned_count=len(images),
        pagination=PagePagination.page_info(page, page_size, total_count),
    )

    return ResponseBuilder.ok(response.model_dump(), request_id=request_id)
