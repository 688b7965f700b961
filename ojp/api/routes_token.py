"""private_key_jwt token endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from ojp.api.deps import get_key_provider, get_public_url, load_settings, server_error
from ojp.core.settings import ProviderSettings
from ojp.crypto.jwt_manager import JWTManager
from ojp.crypto.provider import KeyProvider
from ojp.errors import KeyMaterialError, TokenSigningError
from ojp.tokens.issuer import issue_cimd_token, issue_custom_token, parse_request_body
from ojp.tokens.types import (
    CIMDTokenRequest,
    CIMDTokenResponse,
    CustomTokenRequest,
    TokenResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/client-id-document-token", response_model=None)
async def client_id_document_token(
    request: Request,
    settings: Annotated[ProviderSettings, Depends(load_settings)],
    public_url: Annotated[str, Depends(get_public_url)],
    provider: Annotated[KeyProvider, Depends(get_key_provider)],
) -> CIMDTokenResponse | JSONResponse:
    """POST /client-id-document-token -- token whose client id is a CIMD URL."""
    body = parse_request_body(CIMDTokenRequest, await request.body())
    try:
        jwt_mgr = JWTManager.from_key_material(provider.get_key_material())
        return issue_cimd_token(body, settings, public_url, jwt_mgr)
    except TokenSigningError as exc:
        logger.exception("CIMD token signing failed")
        return server_error(exc)
    except KeyMaterialError as exc:
        return server_error(exc)


@router.post("/private-key-jwt-token", response_model=None)
async def private_key_jwt_token(
    request: Request,
    settings: Annotated[ProviderSettings, Depends(load_settings)],
    public_url: Annotated[str, Depends(get_public_url)],
    provider: Annotated[KeyProvider, Depends(get_key_provider)],
) -> TokenResponse | JSONResponse:
    """POST /private-key-jwt-token -- token for a caller-chosen client id."""
    body = parse_request_body(CustomTokenRequest, await request.body())
    try:
        jwt_mgr = JWTManager.from_key_material(provider.get_key_material())
        return issue_custom_token(body, settings, public_url, jwt_mgr)
    except TokenSigningError as exc:
        logger.exception("Custom token signing failed")
        return server_error(exc)
    except KeyMaterialError as exc:
        return server_error(exc)
