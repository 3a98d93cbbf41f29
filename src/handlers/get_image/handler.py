"""
Lambda handler responsible for serving stored images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.models.errors import NotFoundError, StorageError, ValidationError
from core.utils.constants import CDN_CACHE_CONTROL
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``GET /cdn/{clientID}/{filename}`` requests.

    No token is required. The image is looked up in the upload root first and
    the profile root second, then returned as a base64-encoded binary body
    with a one-day public ``Cache-Control``.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received image view request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            GetImageRequest,
            {
                "client_id": path_params.get("clientID") or "",
                "filename": path_params.get("filename") or "",
            },
        )
    except PydanticValidationError as exc:
        logger.warning(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            "Invalid client ID or filename",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = GetService.from_config(ServiceConfig.from_env())

    try:
        content, content_type = service.load_image(request.filename, request.client_id)

    except ValidationError as exc:
        logger.warning(
            "Rejected unsafe image path",
            extra={"client_id": request.client_id, "file_name": request.filename},
        )
        return ResponseBuilder.bad_request(exc.message, error_code=exc.error_code, request_id=request_id)

    except NotFoundError as exc:
        logger.info(
            "Image not found",
            extra={"client_id": request.client_id, "file_name": request.filename},
        )
        return ResponseBuilder.not_found(exc.message, error_code=exc.error_code, request_id=request_id)

    except StorageError as exc:
        logger.exception(
            "Get image failed",
            extra={"client_id": request.client_id, "file_name": request.filename},
        )
        return ResponseBuilder.internal_error(exc.message, error_code=exc.error_code, request_id=request_id)

    return ResponseBuilder.binary_response(
        content,
        content_type=content_type,
        headers={"Cache-Control": CDN_CACHE_CONTROL},
    )
