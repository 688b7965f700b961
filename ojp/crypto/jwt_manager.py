"""JWT creation and verification using RS256."""

from datetime import UTC, datetime
from typing import Any

import jwt
import uuid_utils
from jwt.types import Options

from ojp.crypto.types import DecodedToken, SigningKeyData, TokenClaims
from ojp.errors import TokenSigningError


class JWTManager:
    """Signs private_key_jwt client assertions and verifies them."""

    def __init__(self, private_key_pem: str, public_key_pem: str, kid: str) -> None:
        self._private_key_pem = private_key_pem
        self._public_key_pem = public_key_pem
        self._kid = kid

    @classmethod
    def from_key_material(cls, material: SigningKeyData) -> "JWTManager":
        return cls(
            private_key_pem=material.private_key_pem,
            public_key_pem=material.public_key_pem,
            kid=material.kid,
        )

    @property
    def kid(self) -> str:
        return self._kid

    def build_payload(
        self, claims: TokenClaims, now: datetime | None = None
    ) -> dict[str, Any]:
        """Assemble the RFC 7523 claim set for ``claims``."""
        iat = int((now or datetime.now(UTC)).timestamp())
        payload: dict[str, Any] = {
            "iss": claims.client_id,
            "sub": claims.client_id,
            "exp": iat + claims.ttl_seconds,
            "iat": iat,
            "jti": str(uuid_utils.uuid4()),
        }
        if claims.aud:
            payload["aud"] = claims.aud
        if claims.scope is not None:
            payload["scope"] = claims.scope
        return payload

    def create_client_assertion(
        self, claims: TokenClaims, now: datetime | None = None
    ) -> str:
        """Create a signed RS256 JWT.

        Raises:
            TokenSigningError: If PyJWT or the key backend rejects the signing.
        """
        payload = self.build_payload(claims, now)
        try:
            return jwt.encode(
                payload,
                self._private_key_pem,
                algorithm="RS256",
                headers={"kid": self._kid, "typ": "JWT"},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise TokenSigningError(f"Failed to sign token: {exc}") from exc

    def verify_token(
        self,
        token: str,
        issuer: str | None = None,
        audience: str | list[str] | None = None,
    ) -> DecodedToken:
        """Verify and decode an RS256 JWT token."""
        opts: Options = {}
        if audience is None:
            opts["verify_aud"] = False
        raw = jwt.decode(
            token,
            self._public_key_pem,
            algorithms=["RS256"],
            issuer=issuer,
            audience=audience,
            options=opts,
        )
        return DecodedToken.model_validate(raw)
