"""Tests for CIMD override encoding and config merging."""

import base64

import pytest

from ojp.client.metadata import (
    ClientMetadataOverrides,
    client_id_for,
    decode_overrides,
    encode_overrides,
    parse_overrides_token,
    resolve_client_config,
)
from ojp.core.settings import ProviderSettings

PUBLIC_URL = "https://jwt.example.com"


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestEncodeOverrides:
    """Tests for the path token encoding."""

    def test_only_present_fields(self) -> None:
        token = encode_overrides(ClientMetadataOverrides(scope="openid"))
        padded = token + "=" * (-len(token) % 4)
        assert base64.urlsafe_b64decode(padded) == b'{"scope":"openid"}'

    def test_url_safe_without_padding(self) -> None:
        overrides = ClientMetadataOverrides(
            redirect_uris=["https://app.example.com/cb?x=1&y=>>>"],
            client_name="???",
        )
        token = encode_overrides(overrides)
        assert "=" not in token
        assert "+" not in token
        assert "/" not in token

    def test_deterministic(self) -> None:
        overrides = ClientMetadataOverrides(
            grant_types=["client_credentials"], scope="a b"
        )
        assert encode_overrides(overrides) == encode_overrides(overrides)


class TestDecodeOverrides:
    """Tests for lenient path token decoding."""

    @pytest.mark.parametrize(
        "overrides",
        [
            ClientMetadataOverrides(),
            ClientMetadataOverrides(scope="openid profile email"),
            ClientMetadataOverrides(
                redirect_uris=["http://localhost:8080/callback", "https://x/cb"],
                scope="read",
                client_name="Test Client",
                grant_types=["authorization_code", "refresh_token"],
            ),
            ClientMetadataOverrides(client_name="Клиент ✓", redirect_uris=[]),
        ],
    )
    def test_roundtrip(self, overrides: ClientMetadataOverrides) -> None:
        assert decode_overrides(encode_overrides(overrides)) == overrides

    @pytest.mark.parametrize(
        "token",
        [
            "!!!not-base64!!!",
            "a",
            _b64url(b"not json"),
            _b64url(b"[1, 2, 3]"),
            _b64url(b"5"),
            _b64url(b'"just a string"'),
            _b64url(b'{"redirect_uris": "not-a-list"}'),
            _b64url(b"\xff\xfe\xfd"),
            _b64url(b"{}") + "\n",
            "",
        ],
    )
    def test_malformed_means_no_overrides(self, token: str) -> None:
        assert decode_overrides(token) == ClientMetadataOverrides()
        assert parse_overrides_token(token) is None

    def test_unknown_keys_ignored(self) -> None:
        token = _b64url(b'{"scope": "x", "logo_uri": "https://x/logo.png"}')
        assert decode_overrides(token) == ClientMetadataOverrides(scope="x")

    def test_empty_object_is_valid(self) -> None:
        assert parse_overrides_token(_b64url(b"{}")) == ClientMetadataOverrides()


class TestClientIdFor:
    """Tests for CIMD client id URLs."""

    def test_without_token(self) -> None:
        assert client_id_for(PUBLIC_URL) == f"{PUBLIC_URL}/oauth-client"

    def test_with_token(self) -> None:
        assert client_id_for(PUBLIC_URL + "/", "abc") == (
            f"{PUBLIC_URL}/oauth-client/abc"
        )


class TestResolveClientConfig:
    """Tests for merging overrides over defaults."""

    def test_defaults(self, settings: ProviderSettings) -> None:
        config = resolve_client_config(settings, PUBLIC_URL)
        assert config.client_id == f"{PUBLIC_URL}/oauth-client"
        assert config.jwks_uri == f"{PUBLIC_URL}/jwks"
        assert config.client_name == "OAuth JWT Provider"
        assert config.scope == "read write"
        assert config.token_ttl == 3600
        assert config.audiences == []
        assert config.redirect_uris == ["http://localhost:8080/callback"]
        assert "client_credentials" in config.grant_types

    def test_overrides_win(self, settings: ProviderSettings) -> None:
        overrides = ClientMetadataOverrides(
            scope="openid profile email",
            grant_types=["authorization_code"],
            client_name="Mine",
            redirect_uris=["https://app/cb"],
        )
        config = resolve_client_config(settings, PUBLIC_URL, overrides)
        assert config.scope == "openid profile email"
        assert config.grant_types == ["authorization_code"]
        assert config.client_name == "Mine"
        assert config.redirect_uris == ["https://app/cb"]
        assert config.client_id == (
            f"{PUBLIC_URL}/oauth-client/{encode_overrides(overrides)}"
        )

    def test_empty_strings_fall_back(self, settings: ProviderSettings) -> None:
        overrides = ClientMetadataOverrides(scope="", client_name="")
        config = resolve_client_config(settings, PUBLIC_URL, overrides)
        assert config.scope == "read write"
        assert config.client_name == "OAuth JWT Provider"

    def test_empty_overrides_use_plain_client_id(
        self, settings: ProviderSettings
    ) -> None:
        config = resolve_client_config(settings, PUBLIC_URL, ClientMetadataOverrides())
        assert config.client_id == f"{PUBLIC_URL}/oauth-client"

    def test_given_token_reused_verbatim(self, settings: ProviderSettings) -> None:
        token = _b64url(b'{"scope": "x"}')
        config = resolve_client_config(
            settings, PUBLIC_URL, decode_overrides(token), token=token
        )
        assert config.client_id == f"{PUBLIC_URL}/oauth-client/{token}"

    def test_configured_audiences(self) -> None:
        settings = ProviderSettings(jwt_audience="https://a/token, https://b/token")
        config = resolve_client_config(settings, PUBLIC_URL)
        assert config.audiences == ["https://a/token", "https://b/token"]
