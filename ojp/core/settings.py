"""Application settings loaded from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

TOKEN_TTL_DEFAULT = 3600
DEFAULT_REDIRECT_URIS = "http://localhost:8080/callback"
DEFAULT_GRANT_TYPES = "authorization_code,refresh_token,client_credentials"
DEFAULT_SCOPE = "read write"
DEFAULT_CLIENT_NAME = "OAuth JWT Provider"


def split_csv(value: str) -> list[str]:
    """Parse a comma-separated setting, dropping blank items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class ProviderSettings(BaseSettings):
    """Token, client metadata, and signing key settings."""

    model_config = SettingsConfigDict(env_prefix="")

    public_url: str = ""
    jwt_audience: str = ""
    default_redirect_uris: str = DEFAULT_REDIRECT_URIS
    default_grant_types: str = DEFAULT_GRANT_TYPES
    default_scope: str = DEFAULT_SCOPE
    default_client_name: str = DEFAULT_CLIENT_NAME
    token_ttl: int = TOKEN_TTL_DEFAULT

    key_mode: Literal["ephemeral", "fixed"] = "ephemeral"
    signing_key_pem: str = ""
    signing_key_path: str = ""
    signing_key_kid: str = ""
    signing_key_encryption_key: str = ""

    cors_origins: str = "*"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8787

    def get_audience_list(self) -> list[str]:
        """Default token audiences."""
        return split_csv(self.jwt_audience)

    def get_redirect_uri_list(self) -> list[str]:
        """Default client redirect URIs."""
        return split_csv(self.default_redirect_uris) or split_csv(
            DEFAULT_REDIRECT_URIS
        )

    def get_grant_type_list(self) -> list[str]:
        """Default client grant types."""
        return split_csv(self.default_grant_types) or split_csv(DEFAULT_GRANT_TYPES)

    def get_cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return split_csv(self.cors_origins)

    def resolve_public_url(self, request_base_url: str) -> str:
        """Configured public URL, else the scheme and host the request came in on."""
        return (self.public_url or request_base_url).rstrip("/")
