"""Shared test fixtures for the OAuth JWT provider."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from ojp.core.app import create_app
from ojp.core.settings import ProviderSettings
from ojp.crypto.jwt_manager import JWTManager
from ojp.crypto.keys import generate_rsa_keypair
from ojp.crypto.provider import FixedKeyProvider
from ojp.crypto.types import SigningKeyData

BASE_URL = "http://test"

_SETTINGS_ENV = (
    "PUBLIC_URL",
    "JWT_AUDIENCE",
    "DEFAULT_REDIRECT_URIS",
    "DEFAULT_GRANT_TYPES",
    "DEFAULT_SCOPE",
    "DEFAULT_CLIENT_NAME",
    "TOKEN_TTL",
    "KEY_MODE",
    "SIGNING_KEY_PEM",
    "SIGNING_KEY_PATH",
    "SIGNING_KEY_KID",
    "SIGNING_KEY_ENCRYPTION_KEY",
    "CORS_ORIGINS",
    "LOG_LEVEL",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against the documented defaults."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def keypair() -> SigningKeyData:
    """One RSA keypair shared by the session; generation is slow."""
    return generate_rsa_keypair()


@pytest.fixture
def settings() -> ProviderSettings:
    return ProviderSettings()


@pytest.fixture
def jwt_mgr(keypair: SigningKeyData) -> JWTManager:
    return JWTManager.from_key_material(keypair)


@pytest.fixture
def key_provider(keypair: SigningKeyData) -> FixedKeyProvider:
    return FixedKeyProvider(private_key_pem=keypair.private_key_pem, kid=keypair.kid)


@pytest.fixture
async def client(key_provider: FixedKeyProvider) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client bound to the shared keypair."""
    app = create_app(key_provider=key_provider)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac
