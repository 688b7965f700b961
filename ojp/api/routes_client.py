"""Client metadata document and JWKS endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from starlette.responses import JSONResponse

from ojp.api.deps import get_key_provider, get_public_url, load_settings, server_error
from ojp.client.documents import (
    ClientMetadataDocument,
    build_client_metadata,
    build_key_set,
)
from ojp.client.metadata import parse_overrides_token, resolve_client_config
from ojp.core.settings import ProviderSettings
from ojp.crypto.provider import KeyProvider
from ojp.crypto.types import JWKSResponse
from ojp.errors import KeyMaterialError

router = APIRouter()

# Ephemeral keys change on restart; keep verifier caches short.
JWKS_CACHE_CONTROL = "public, max-age=300"


@router.get(
    "/oauth-client",
    response_model=ClientMetadataDocument,
    response_model_exclude_none=True,
)
async def client_metadata(
    settings: Annotated[ProviderSettings, Depends(load_settings)],
    public_url: Annotated[str, Depends(get_public_url)],
) -> ClientMetadataDocument:
    """Default client metadata document."""
    return build_client_metadata(resolve_client_config(settings, public_url))


@router.get(
    "/oauth-client/{token}",
    response_model=ClientMetadataDocument,
    response_model_exclude_none=True,
)
async def client_metadata_with_overrides(
    token: str,
    settings: Annotated[ProviderSettings, Depends(load_settings)],
    public_url: Annotated[str, Depends(get_public_url)],
) -> ClientMetadataDocument:
    """Client metadata document with overrides decoded from the path.

    An undecodable token serves the default document under the plain
    ``/oauth-client`` client id.
    """
    overrides = parse_overrides_token(token)
    config = resolve_client_config(
        settings,
        public_url,
        overrides,
        token=token if overrides is not None else None,
    )
    return build_client_metadata(config)


@router.get("/jwks", response_model=None)
async def jwks(
    response: Response,
    provider: Annotated[KeyProvider, Depends(get_key_provider)],
) -> JWKSResponse | JSONResponse:
    """JSON Web Key Set endpoint."""
    try:
        material = provider.get_key_material()
    except KeyMaterialError as exc:
        return server_error(exc)
    response.headers["Cache-Control"] = JWKS_CACHE_CONTROL
    return build_key_set(material)
