"""
Lambda handler responsible for batch image uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.config import ServiceConfig
from core.models.errors import AuthError, StorageError, ValidationError
from core.security.access_gate import access_gate, get_request_claims
from core.utils.constants import UPLOAD_FORM_FIELD
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_multipart_event
from core.utils.response import ResponseBuilder

from .models import UploadImagesResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@access_gate
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle batch image upload requests.

    Expected API Gateway event structure:
    {
        "headers": {
            "Authorization": "Bearer <token>",
            "Content-Type": "multipart/form-data; boundary=..."
        },
        "body": "<base64 multipart body>",   # one or more `images` parts
        "isBase64Encoded": true
    }

    Args:
        event: API Gateway Lambda proxy event containing the multipart form
        context: AWS Lambda execution context

    Returns:
        201 with ``{"data": [UploadedAsset, ...]}`` in request order
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
        claims = get_request_claims(event)
    except AuthError as exc:
        return ResponseBuilder.unauthorized(exc.message, error_code=exc.error_code, request_id=request_id)

    try:
        form = parse_multipart_event(event)
    except ValidationError as exc:
        return ResponseBuilder.bad_request(exc.message, error_code=exc.error_code, request_id=request_id)

    try:
        files = form.get_files(UPLOAD_FORM_FIELD)
        if not files:
            logger.warning("Upload request without files", extra={"client_id": claims.client_id})
            return ResponseBuilder.bad_request("No files uploaded", request_id=request_id)

        service = UploadService.from_config(ServiceConfig.from_env())
        assets = service.upload_images(files, claims.client_id)

    except ValidationError as exc:
        logger.warning(
            "Validation error during image upload",
            extra={"client_id": claims.client_id, "error": exc.message},
        )
        return ResponseBuilder.bad_request(exc.message, error_code=exc.error_code, request_id=request_id)

    except StorageError as exc:
        logger.exception(
            "Storage error during image upload",
            extra={"client_id": claims.client_id},
        )
        return ResponseBuilder.internal_error(exc.message, error_code=exc.error_code, request_id=request_id)

    finally:
        form.close()

    response = UploadImagesResponse(data=assets)
    return ResponseBuilder.created(response.model_dump())
