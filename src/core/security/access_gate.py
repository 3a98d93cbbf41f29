"""Bearer-token gate for API Gateway Lambda handlers.

The gate runs before the wrapped handler. It rejects the request with 401
unless the ``Authorization`` header carries a token the codec accepts, then
attaches the decoded claims to ``event["requestContext"]["authorizer"]["claims"]``
so the handler can read the caller's tenant with ``get_request_claims``.

Example:
    @api_gateway_handler
    @access_gate
    def handler(event, context):
        claims = get_request_claims(event)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.middleware_factory import lambda_handler_decorator
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.infrastructure.cache.redis_cache import RedisKeyValueCache
from core.models.claims import TokenClaims
from core.models.errors import AuthError, CacheBackendError
from core.repositories.cache_repository import KeyValueCache
from core.security.token_codec import JWTTokenCodec, TokenCodec
from core.utils.constants import (
    AUTHORIZATION_HEADER,
    ERROR_CODE_INVALID_CLAIMS,
    ERROR_CODE_INVALID_TOKEN,
    ERROR_CODE_MISSING_TOKEN,
    ERROR_CODE_TOKEN_REVOKED,
)
from core.utils.request import get_header
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)

JsonDict = dict[str, Any]


def default_token_codec() -> TokenCodec:
    return JWTTokenCodec.from_config(ServiceConfig.from_env())


def default_token_cache() -> KeyValueCache | None:
    """Return the token cache when revocation checks are enabled."""
    config = ServiceConfig.from_env()
    if not config.token_cache_check:
        return None
    return RedisKeyValueCache.from_config(config)


def _token_is_current(cache: KeyValueCache, tenant_id: str, token: str) -> bool:
    try:
        cached = cache.get_token(tenant_id)
    except CacheBackendError:
        logger.warning("Token cache unavailable; treating as no cached value", extra={"client_id": tenant_id})
        return False
    return bool(cached) and cached == token


@lambda_handler_decorator
def access_gate(
    handler: Callable[[JsonDict, Any], JsonDict],
    event: JsonDict,
    context: Any,
    codec_provider: Callable[[], TokenCodec] = default_token_codec,
    cache_provider: Callable[[], KeyValueCache | None] = default_token_cache,
) -> JsonDict:
    if event.get("httpMethod") == "OPTIONS":
        return handler(event, context)

    request_id = getattr(context, "aws_request_id", None)
    header = get_header(event, AUTHORIZATION_HEADER)

    if not header or not header.strip():
        logger.info("Rejected request without token", extra={"path": event.get("path")})
        return ResponseBuilder.unauthorized(
            "Missing token",
            error_code=ERROR_CODE_MISSING_TOKEN,
            request_id=request_id,
        )

    codec = codec_provider()

    try:
        codec.validate(header)
    except AuthError as exc:
        logger.info("Rejected invalid token", extra={"reason": exc.message})
        return ResponseBuilder.unauthorized(
            "Invalid token",
            error_code=ERROR_CODE_INVALID_TOKEN,
            request_id=request_id,
        )

    try:
        claims = codec.extract_claims(header)
    except AuthError as exc:
        logger.info("Rejected token claims", extra={"reason": exc.message})
        return ResponseBuilder.unauthorized(
            "Invalid token claims",
            error_code=ERROR_CODE_INVALID_CLAIMS,
            request_id=request_id,
        )

    cache = cache_provider()
    if cache is not None and not _token_is_current(
        cache, claims.client_id, JWTTokenCodec.strip_scheme(header)
    ):
        logger.info("Rejected revoked token", extra={"client_id": claims.client_id})
        return ResponseBuilder.unauthorized(
            "Token revoked",
            error_code=ERROR_CODE_TOKEN_REVOKED,
            request_id=request_id,
        )

    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer") or {}
    authorizer["claims"] = claims.model_dump()
    request_context["authorizer"] = authorizer
    event["requestContext"] = request_context

    logger.debug("Request authenticated", extra={"client_id": claims.client_id})
    return handler(event, context)


def get_request_claims(event: JsonDict) -> TokenClaims:
    """Return the claims the gate attached to ``event``.

    Raises:
        AuthError: If the event was not authenticated
    """
    raw = ((event.get("requestContext") or {}).get("authorizer") or {}).get("claims")
    if not raw:
        raise AuthError(
            message="Invalid token claims",
            error_code=ERROR_CODE_INVALID_CLAIMS,
        )

    try:
        return TokenClaims.model_validate(raw)
    except PydanticValidationError as exc:
        raise AuthError(
            message="Invalid token claims",
            error_code=ERROR_CODE_INVALID_CLAIMS,
        ) from exc
