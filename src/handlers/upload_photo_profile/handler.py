"""
Lambda handler responsible for replacing a tenant's profile photo.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.config import ServiceConfig
from core.models.errors import AuthError, StorageError, ValidationError
from core.security.access_gate import access_gate, get_request_claims
from core.utils.constants import PROFILE_UPLOAD_FORM_FIELD
from core.utils.decorators import api_gateway_handler
from core.utils.multipart import parse_multipart_event
from core.utils.response import ResponseBuilder
from handlers.upload_images.service import UploadService

from .models import UploadPhotoProfileResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
@access_gate
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle profile photo upload requests.

    The multipart form must carry one file in the ``image`` field; any
    previous profile photo of the tenant is removed before it is stored.

    Args:
        event: API Gateway Lambda proxy event containing the multipart form
        context: AWS Lambda execution context

    Returns:
        201 with ``{"data": UploadedAsset}``
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received profile photo upload request",
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
        files = form.get_files(PROFILE_UPLOAD_FORM_FIELD)
        if not files:
            logger.warning("Profile upload without file", extra={"client_id": claims.client_id})
            return ResponseBuilder.bad_request("No files uploaded", request_id=request_id)

        if len(files) > 1:
            logger.info(
                "Profile upload carried several files; keeping the first",
                extra={"client_id": claims.client_id, "count": len(files)},
            )

        service = UploadService.from_config(ServiceConfig.from_env())
        asset = service.upload_photo_profile(files[0], claims.client_id)

    except ValidationError as exc:
        logger.warning(
            "Validation error during profile upload",
            extra={"client_id": claims.client_id, "error": exc.message},
        )
        return ResponseBuilder.bad_request(exc.message, error_code=exc.error_code, request_id=request_id)

    except StorageError as exc:
        logger.exception(
            "Storage error during profile upload",
            extra={"client_id": claims.client_id},
        )
        return ResponseBuilder.internal_error(exc.message, error_code=exc.error_code, request_id=request_id)

    finally:
        form.close()

    response = UploadPhotoProfileResponse(data=asset)
    return ResponseBuilder.created(response.model_dump())
