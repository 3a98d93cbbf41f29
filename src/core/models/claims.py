"""Bearer token claim models."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import TENANT_ID_MAX_LENGTH, TENANT_ID_PATTERN


class TokenClaims(BaseModel):
    """Decoded token payload.

    ``client_id`` identifies the tenant and is the only required claim.
    Unknown claims are kept so downstream code can inspect them.
    """

    model_config = ConfigDict(extra="allow")

    client_id: StrictStr = Field(
        ...,
        min_length=1,
        max_length=TENANT_ID_MAX_LENGTH,
        pattern=TENANT_ID_PATTERN,
        description="Tenant identifier",
    )
    user_id: int | str | None = None
    role_id: int | str | None = None
    username: str | None = None
    exp: float | None = None
    iat: float | None = None

