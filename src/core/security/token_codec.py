"""Bearer token validation and claim extraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.config import ServiceConfig
from core.models.claims import TokenClaims
from core.models.errors import AuthError
from core.utils.constants import (
    BEARER_PREFIX,
    DEFAULT_JWT_ALGORITHM,
    ERROR_CODE_INVALID_CLAIMS,
    ERROR_CODE_INVALID_TOKEN,
    ERROR_CODE_MISSING_TOKEN,
)

logger = Logger(UTC=True)


class TokenCodec(ABC):
    """Contract for verifying bearer tokens.

    Both operations are synchronous, side-effect free and fail closed:
    any problem raises ``AuthError``.
    """

    @abstractmethod
    def validate(self, token: str) -> None:
        """Check encoding, signature and expiry.

        Raises:
            AuthError: If the token cannot be trusted
        """

    @abstractmethod
    def extract_claims(self, token: str) -> TokenClaims:
        """Decode the token and return its claims.

        Raises:
            AuthError: If the token is invalid or lacks a tenant claim
        """


class JWTTokenCodec(TokenCodec):
    """HMAC-signed JWT implementation of ``TokenCodec``."""

    def __init__(self, secret: str, *, algorithm: str = DEFAULT_JWT_ALGORITHM) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")

        self._secret = secret
        self._algorithm = algorithm

    @classmethod
    def from_config(cls, config: ServiceConfig) -> JWTTokenCodec:
        return cls(config.jwt_secret.get_secret_value(), algorithm=config.jwt_algorithm)

    @staticmethod
    def strip_scheme(token: str | None) -> str:
        """Return the raw token from an ``Authorization`` header value."""
        if not token or not token.strip():
            raise AuthError(
                message="Missing token",
                error_code=ERROR_CODE_MISSING_TOKEN,
            )

        value = token.strip()
        scheme, _, rest = value.partition(" ")
        if scheme.lower() == BEARER_PREFIX.strip().lower():
            value = rest.strip()

        if not value:
            raise AuthError(
                message="Missing token",
                error_code=ERROR_CODE_MISSING_TOKEN,
            )
        return value

    def encode(self, claims: dict[str, Any], *, expires_in: timedelta | None = None) -> str:
        """Sign ``claims`` into a token, optionally stamping ``iat``/``exp``."""
        payload = dict(claims)

        if expires_in is not None:
            now = datetime.now(timezone.utc)
            payload["iat"] = int(now.timestamp())
            payload["exp"] = int((now + expires_in).timestamp())

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str) -> dict[str, Any]:
        raw = self.strip_scheme(token)

        try:
            payload: dict[str, Any] = jwt.decode(
                raw,
                self._secret,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("Rejected expired token")
            raise AuthError(
                message="Token has expired",
                error_code=ERROR_CODE_INVALID_TOKEN,
            ) from exc
        except jwt.InvalidSignatureError as exc:
            logger.warning("Rejected token with invalid signature")
            raise AuthError(
                message="Token signature is invalid",
                error_code=ERROR_CODE_INVALID_TOKEN,
            ) from exc
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected malformed token", extra={"reason": str(exc)})
            raise AuthError(
                message="Token is malformed",
                error_code=ERROR_CODE_INVALID_TOKEN,
            ) from exc

        return payload

    def validate(self, token: str) -> None:
        self._decode(token)

    def extract_claims(self, token: str) -> TokenClaims:
        payload = self._decode(token)

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as exc:
            logger.warning(
                "Token claims failed validation",
                extra={"fields": [".".join(str(x) for x in err["loc"]) for err in exc.errors()]},
            )
            raise AuthError(
                message="Token is missing a valid client_id claim",
                error_code=ERROR_CODE_INVALID_CLAIMS,
            ) from exc
