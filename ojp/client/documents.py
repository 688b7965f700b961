"""OAuth Client Metadata and JWKS document builders."""

from pydantic import BaseModel

from ojp.client.metadata import EffectiveClientConfig
from ojp.crypto.keys import pem_to_jwk_entry
from ojp.crypto.types import JWKSResponse, SigningKeyData

AUTH_METHOD = "private_key_jwt"
SIGNING_ALG = "RS256"


class ClientMetadataDocument(BaseModel):
    """RFC 7591 client metadata served at the CIMD client id URL."""

    client_id: str
    client_name: str
    grant_types: list[str]
    token_endpoint_auth_method: str = AUTH_METHOD
    token_endpoint_auth_signing_alg: str = SIGNING_ALG
    jwks_uri: str
    scope: str
    redirect_uris: list[str] | None = None


def build_client_metadata(config: EffectiveClientConfig) -> ClientMetadataDocument:
    """Build the client metadata document from the merged config."""
    return ClientMetadataDocument(
        client_id=config.client_id,
        client_name=config.client_name,
        grant_types=config.grant_types,
        jwks_uri=config.jwks_uri,
        scope=config.scope,
        redirect_uris=config.redirect_uris or None,
    )


def build_key_set(*materials: SigningKeyData) -> JWKSResponse:
    """JWKS with the public half of each key, active key first."""
    return JWKSResponse(
        keys=[pem_to_jwk_entry(m.public_key_pem, m.kid) for m in materials]
    )
