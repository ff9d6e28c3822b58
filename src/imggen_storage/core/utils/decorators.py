"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from imggen_storage.core.models.errors import ImageServiceError
from imggen_storage.core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

JsonDict = dict[str, Any]


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        # logger.exception automatically includes traceback
        logger.exception(message, extra=log_extra)
    else:
        # For warnings, manually add traceback
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Translation of escaped domain errors into HTTP responses
    - Request ID tracking and structured logging

    Example:
        @api_gateway_handler
        def handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        # Handle CORS preflight requests
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.preflight(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except ImageServiceError as exc:
            server_side = ResponseBuilder.status_for(exc) >= HTTPStatus.INTERNAL_SERVER_ERROR
            _log_error(
                "Domain error escaped handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception" if server_side else "warning",
            )
            return ResponseBuilder.from_error(exc, request_id=request_id, cors_origin=cors_origin)

        # Client errors (4xx) - Bad Request
        except (ValueError, KeyError, TypeError, UnicodeDecodeError) as exc:
            _log_error(
                "Invalid input in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.bad_request(
                "The provided data is invalid. Please check your input and try again.",
                request_id=request_id,
                cors_origin=cors_origin,
            )

        # Server errors (5xx) - Timeout
        except TimeoutError as exc:
            _log_error(
                "Request timeout",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.error(
                message="The request took too long to process. Please try again.",
                status=HTTPStatus.GATEWAY_TIMEOUT,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        # Catch-all for unexpected errors
        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                "We're experiencing technical difficulties. Please try again in a few moments.",
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
