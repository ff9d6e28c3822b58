"""
Lambda handler responsible for image retrieval.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imggen_storage.core.services.image_storage_service import ImageStorageService
from imggen_storage.core.utils.cancellation import LambdaDeadline
from imggen_storage.core.utils.constants import METRICS_NAMESPACE
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest, ImageMetadataHeader

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image retrieval requests.

    This function:
     - Default: return the image metadata as JSON
     - content=true: return the image bytes, with metadata in the
       X-Image-Metadata header

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image get request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": request_id,
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    params = {
        "image_id": path_params.get("image_id"),
        "content": str(query_params.get("content", "false")).lower() == "true",
    }

    try:
        request = validate_request(GetImageRequest, params)
    except ValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = ImageStorageService()
    cancel = LambdaDeadline(context)

    if not request.content:
        metadata = service.get_metadata(request.image_id, cancel=cancel)
        if metadata is None:
            logger.info("Image not found", extra={"image_id": request.image_id})
            return ResponseBuilder.image_not_found(request.image_id, request_id=request_id)
        return ResponseBuilder.ok(metadata.model_dump(), request_id=request_id)

    metadata, data = service.get_full(request.image_id, cancel=cancel)
    if metadata is None or data is None:
        logger.info(
            "Image or its content not found",
            extra={"image_id": request.image_id, "metadata_found": metadata is not None},
        )
        return ResponseBuilder.image_not_found(request.image_id, request_id=request_id)

    header = ImageMetadataHeader(**metadata.model_dump())

    return ResponseBuilder.image_content(
        data,
        mime_type=metadata.mime_type,
        metadata_json=header.model_dump_json(),
    )
