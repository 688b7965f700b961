"""Client ID Metadata Document (CIMD) override encoding and config merging.

A CIMD client id is a URL that, when fetched, returns the client's metadata.
Overrides for that document travel inside the URL itself as a base64url
encoded JSON object: ``{public_url}/oauth-client/{token}``.
"""

import base64
import binascii
import json
import logging
import re

from pydantic import BaseModel, ConfigDict, ValidationError

from ojp.core.settings import ProviderSettings

logger = logging.getLogger(__name__)

CLIENT_METADATA_PATH = "/oauth-client"
JWKS_PATH = "/jwks"
TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class ClientMetadataOverrides(BaseModel):
    """Optional client metadata fields carried in a CIMD client id."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    redirect_uris: list[str] | None = None
    scope: str | None = None
    client_name: str | None = None
    grant_types: list[str] | None = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class EffectiveClientConfig(BaseModel):
    """Settings merged with per-request overrides."""

    public_url: str
    client_id: str
    jwks_uri: str
    audiences: list[str]
    client_name: str
    scope: str
    token_ttl: int
    redirect_uris: list[str]
    grant_types: list[str]


def encode_overrides(overrides: ClientMetadataOverrides) -> str:
    """Serialize the present fields as compact JSON and base64url-encode them."""
    document = json.dumps(
        overrides.model_dump(exclude_none=True),
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return base64.urlsafe_b64encode(document.encode("utf-8")).rstrip(b"=").decode()


def parse_overrides_token(token: str) -> ClientMetadataOverrides | None:
    """Decode a path token, or ``None`` if it is not a valid overrides object."""
    if not TOKEN_PATTERN.fullmatch(token):
        return None
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded).decode("utf-8")
        data = json.loads(raw)
    except (binascii.Error, ValueError) as exc:
        logger.warning("Ignoring undecodable client metadata token: %s", exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring client metadata token that is not a JSON object")
        return None
    try:
        return ClientMetadataOverrides.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Ignoring client metadata token with invalid fields: %d error(s)",
            exc.error_count(),
        )
        return None


def decode_overrides(token: str) -> ClientMetadataOverrides:
    """Decode a path token; anything malformed means no overrides."""
    return parse_overrides_token(token) or ClientMetadataOverrides()


def client_id_for(public_url: str, token: str | None = None) -> str:
    """CIMD client id URL, with the overrides token as last segment if given."""
    base = f"{public_url.rstrip('/')}{CLIENT_METADATA_PATH}"
    if token:
        return f"{base}/{token}"
    return base


def resolve_client_config(
    settings: ProviderSettings,
    public_url: str,
    overrides: ClientMetadataOverrides | None = None,
    token: str | None = None,
) -> EffectiveClientConfig:
    """Merge overrides over configured defaults.

    ``token`` is the exact path segment the overrides came from; it is reused
    verbatim in ``client_id`` so fetching that id reproduces this document.
    When omitted, non-empty overrides are encoded to build it.
    """
    overrides = overrides or ClientMetadataOverrides()
    if token is None and not overrides.is_empty():
        token = encode_overrides(overrides)
    public_url = public_url.rstrip("/")
    return EffectiveClientConfig(
        public_url=public_url,
        client_id=client_id_for(public_url, token),
        jwks_uri=f"{public_url}{JWKS_PATH}",
        audiences=settings.get_audience_list(),
        client_name=overrides.client_name or settings.default_client_name,
        scope=overrides.scope or settings.default_scope,
        token_ttl=settings.token_ttl,
        redirect_uris=(
            overrides.redirect_uris
            if overrides.redirect_uris is not None
            else settings.get_redirect_uri_list()
        ),
        grant_types=(
            overrides.grant_types
            if overrides.grant_types is not None
            else settings.get_grant_type_list()
        ),
    )
