"""
Lambda handler responsible for deleting a tenant's images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.models.errors import AuthError, ValidationError
from core.security.access_gate import access_gate, get_request_claims
from core.utils.decorators import api_gateway_handler
from core.utils.request import parse_json_body
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteImagesRequest, DeleteImagesResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@access_gate
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Reads the caller's tenant from the verified token claims
    - Validates the ``{"images": [...]}`` JSON body
    - Delegates deletion to the service layer
    - Reports which files were deleted and which failed

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
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        claims = get_request_claims(event)
    except AuthError as exc:
        return ResponseBuilder.unauthorized(exc.message, error_code=exc.error_code, request_id=request_id)

    try:
        request = validate_request(DeleteImagesRequest, parse_json_body(event))
    except ValidationError as exc:
        return ResponseBuilder.bad_request(exc.message, error_code=exc.error_code, request_id=request_id)
    except PydanticValidationError as exc:
        logger.warning(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            "Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            request_id=request_id,
        )

    service = DeleteService.from_config(ServiceConfig.from_env())
    result = service.delete_images(claims.client_id, request.images)

    response = DeleteImagesResponse(data=result)
    return ResponseBuilder.ok(response.model_dump())
