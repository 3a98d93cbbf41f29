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

from core.models.errors import (
    AuthError,
    ImageServiceError,
    NotFoundError,
    ValidationError,
)
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]

GENERIC_SERVER_ERROR = "We're experiencing technical difficulties. Please try again in a few moments."


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
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def _domain_error_response(exc: ImageServiceError, request_id: str | None) -> JsonDict:
    if isinstance(exc, ValidationError):
        return ResponseBuilder.bad_request(
            exc.message, error_code=exc.error_code, request_id=request_id
        )

    if isinstance(exc, AuthError):
        return ResponseBuilder.unauthorized(
            exc.message, error_code=exc.error_code, request_id=request_id
        )

    if isinstance(exc, NotFoundError):
        return ResponseBuilder.not_found(
            exc.message, error_code=exc.error_code, request_id=request_id
        )

    return ResponseBuilder.internal_error(
        exc.message, error_code=exc.error_code, request_id=request_id
    )


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Translation of domain errors the handler did not catch itself
    - Generic messages for unexpected exceptions (no internals leak)

    Example:
        @api_gateway_handler
        def lambda_handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(event: Any, context: Any) -> JsonDict:
        if (event or {}).get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content()

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except ImageServiceError as exc:
            _log_error(
                "Unhandled domain error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return _domain_error_response(exc, request_id)

        # Client errors (4xx) - Bad Request
        except (
            ValueError,           # Invalid values
            KeyError,             # Missing required fields in dicts
            TypeError,            # Wrong data types
            UnicodeDecodeError,   # Invalid body encoding
        ) as exc:
            _log_error(
                "Validation error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.bad_request(
                "The provided data is invalid. Please check your input and try again.",
                request_id=request_id,
            )

        # Client errors (4xx) - Not Found
        except FileNotFoundError as exc:
            _log_error(
                "Resource not found",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.not_found(
                "The requested resource was not found.",
                request_id=request_id,
            )

        # Server errors (5xx) - Disk / network I/O
        except OSError as exc:
            _log_error(
                "I/O error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                "Unable to access image storage. Please try again later.",
                request_id=request_id,
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
                GENERIC_SERVER_ERROR,
                request_id=request_id,
            )

    return wrapper
