"""Type definitions for signing key, JWKS, and JWT operations."""

from pydantic import BaseModel, ConfigDict


class SigningKeyData(BaseModel):
    """An RSA keypair for JWT signing."""

    model_config = ConfigDict(frozen=True)

    kid: str
    private_key_pem: str
    public_key_pem: str


class JWKEntry(BaseModel):
    """Single JWK entry in a JWKS response."""

    kty: str = "RSA"
    use: str = "sig"
    alg: str = "RS256"
    kid: str
    n: str
    e: str


class JWKSResponse(BaseModel):
    """JSON Web Key Set response."""

    keys: list[JWKEntry]


class TokenClaims(BaseModel):
    """Claims bundle for a private_key_jwt client assertion.

    ``client_id`` becomes both ``iss`` and ``sub``. ``aud`` and ``scope`` are
    left out of the token when ``None``.
    """

    client_id: str
    aud: str | list[str] | None = None
    scope: str | None = None
    ttl_seconds: int = 3600


class DecodedToken(BaseModel):
    """Decoded and verified JWT token claims."""

    model_config = ConfigDict(extra="allow")

    iss: str = ""
    sub: str = ""
    aud: str | list[str] | None = None
    exp: int = 0
    iat: int = 0
    jti: str = ""
    scope: str | None = None
