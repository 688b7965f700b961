"""Request and response models for the token endpoints."""

from pydantic import BaseModel, ConfigDict

from ojp.client.metadata import ClientMetadataOverrides


class CIMDTokenRequest(BaseModel):
    """Body of POST /client-id-document-token; every field optional."""

    model_config = ConfigDict(extra="ignore")

    aud: str | list[str] | None = None
    exp: int | None = None
    metadata: ClientMetadataOverrides | None = None


class CustomTokenRequest(BaseModel):
    """Body of POST /private-key-jwt-token; every field optional."""

    model_config = ConfigDict(extra="ignore")

    client_id: str | None = None
    scope: str | None = None
    aud: str | list[str] | None = None
    exp: int | None = None


class TokenResponse(BaseModel):
    """Token endpoint response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    scope: str


class CIMDTokenResponse(TokenResponse):
    """Token response that also names the CIMD client id the token was issued for."""

    client_id: str
