"""Claim resolution and issuance for the two private_key_jwt flows.

CIMD flow: the client id is the metadata document URL derived from the
request's ``metadata`` overrides. Its scope is reported in the response only.

Custom flow: the caller names the client id and scope directly; the scope is
embedded as a claim.
"""

import logging
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from ojp.client.metadata import EffectiveClientConfig, resolve_client_config
from ojp.core.settings import TOKEN_TTL_DEFAULT, ProviderSettings
from ojp.crypto.jwt_manager import JWTManager
from ojp.crypto.types import TokenClaims
from ojp.tokens.types import (
    CIMDTokenRequest,
    CIMDTokenResponse,
    CustomTokenRequest,
    TokenResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def parse_request_body(model: type[T], body: bytes) -> T:
    """Parse a JSON body leniently: empty or malformed input means no overrides."""
    if not body.strip():
        return model()
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        logger.info(
            "Ignoring malformed %s body: %d error(s)",
            model.__name__,
            exc.error_count(),
        )
        return model()


def _resolve_audience(
    requested: str | list[str] | None, config: EffectiveClientConfig
) -> str | list[str] | None:
    if requested:
        return requested
    return config.audiences or None


def _resolve_ttl(requested: int | None, config: EffectiveClientConfig) -> int:
    return requested or config.token_ttl or TOKEN_TTL_DEFAULT


def resolve_cimd_claims(
    request: CIMDTokenRequest, settings: ProviderSettings, public_url: str
) -> tuple[TokenClaims, EffectiveClientConfig]:
    """Claims for a token whose client id is a CIMD URL."""
    config = resolve_client_config(settings, public_url, request.metadata)
    claims = TokenClaims(
        client_id=config.client_id,
        aud=_resolve_audience(request.aud, config),
        ttl_seconds=_resolve_ttl(request.exp, config),
    )
    return claims, config


def resolve_custom_claims(
    request: CustomTokenRequest, settings: ProviderSettings, public_url: str
) -> TokenClaims:
    """Claims for a token with a caller-chosen client id."""
    config = resolve_client_config(settings, public_url)
    return TokenClaims(
        client_id=request.client_id or config.client_id,
        aud=_resolve_audience(request.aud, config),
        scope=request.scope or config.scope,
        ttl_seconds=_resolve_ttl(request.exp, config),
    )


def issue_cimd_token(
    request: CIMDTokenRequest,
    settings: ProviderSettings,
    public_url: str,
    jwt_mgr: JWTManager,
    now: datetime | None = None,
) -> CIMDTokenResponse:
    """Sign a CIMD-flow token and wrap it in the token response."""
    claims, config = resolve_cimd_claims(request, settings, public_url)
    token = jwt_mgr.create_client_assertion(claims, now)
    return CIMDTokenResponse(
        access_token=token,
        expires_in=claims.ttl_seconds,
        scope=config.scope,
        client_id=config.client_id,
    )


def issue_custom_token(
    request: CustomTokenRequest,
    settings: ProviderSettings,
    public_url: str,
    jwt_mgr: JWTManager,
    now: datetime | None = None,
) -> TokenResponse:
    """Sign a custom-flow token and wrap it in the token response."""
    claims = resolve_custom_claims(request, settings, public_url)
    token = jwt_mgr.create_client_assertion(claims, now)
    return TokenResponse(
        access_token=token,
        expires_in=claims.ttl_seconds,
        scope=claims.scope or "",
    )
