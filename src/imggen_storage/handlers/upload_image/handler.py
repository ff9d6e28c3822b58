"""
Lambda handler responsible for image upload and metadata creation.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from imggen_storage.core.models.errors import ValidationFailedError
from imggen_storage.core.services.image_storage_service import ImageStorageService
from imggen_storage.core.utils.cancellation import LambdaDeadline
from imggen_storage.core.utils.constants import METRICS_NAMESPACE, format_file_size
from imggen_storage.core.utils.decorators import api_gateway_handler
from imggen_storage.core.utils.mime import detect_mime_type
from imggen_storage.core.utils.response import ResponseBuilder
from imggen_storage.core.utils.validators import sanitize_validation_errors, validate_request

from .models import ImageUploadRequest, ImageUploadResponse

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler decodes base64-encoded image data, determines the MIME type
    (explicit or sniffed from the file signature), stores content and
    metadata as one unit, and returns the created metadata.

    Expected API Gateway event structure:
    {
        "body": "{...}",           # JSON string containing upload data
        "isBase64Encoded": false
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing created image metadata
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request("Invalid JSON body", request_id=request_id)

    try:
        request = validate_request(ImageUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error("Request validation failed", extra={"errors": exc.errors()})
        return ResponseBuilder.bad_request(
            "Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    file_data = request.decoded_file()
    mime_type = request.mime_type
    if not mime_type:
        try:
            mime_type = detect_mime_type(file_data)
        except ValueError:
            logger.warning("Could not detect MIME type", extra={"file_name": request.file_name})
            return ResponseBuilder.bad_request(
                "Unable to detect the image type. Please provide mime_type.",
                request_id=request_id,
            )

    logger.debug(
        "Storing uploaded image",
        extra={
            "file_name": request.file_name,
            "mime_type": mime_type,
            "size": format_file_size(len(file_data)),
        },
    )

    service = ImageStorageService()

    try:
        image_id = service.store(
            file_data,
            request.file_name,
            mime_type,
            request.description,
            cancel=LambdaDeadline(context),
        )
    except ValidationFailedError as exc:
        logger.warning(
            "Upload rejected by validation policy",
            extra={"file_name": request.file_name, "violations": exc.details["violations"]},
        )
        return ResponseBuilder.from_error(exc, request_id=request_id)

    metrics.add_metric(name="ImagesStored", unit=MetricUnit.Count, value=1)

    metadata = service.get_metadata(image_id)
    if metadata is None:
        # Only reachable if the image was deleted between the two calls
        return ResponseBuilder.image_not_found(image_id, request_id=request_id)

    response = ImageUploadResponse(
        **metadata.model_dump(),
        message="Image uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump(), request_id=request_id)
