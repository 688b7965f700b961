"""Process-wide signing key providers.

A provider hands out one ``SigningKeyData`` for its whole lifetime. The first
call creates or loads the key under a lock; later calls read the cached value.
Rotation means building a new provider, never mutating the cached key.
"""

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.fernet import InvalidToken

from ojp.core.settings import ProviderSettings
from ojp.crypto.keys import (
    decrypt_private_key,
    generate_rsa_keypair,
    load_rsa_keypair,
)
from ojp.crypto.types import SigningKeyData
from ojp.errors import KeyMaterialError

logger = logging.getLogger(__name__)


class KeyProvider(ABC):
    """Lazily initialized, exactly-once signing key slot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._material: SigningKeyData | None = None

    def get_key_material(self) -> SigningKeyData:
        """Return the active signing key, creating it on first use.

        Raises:
            KeyMaterialError: If the key cannot be created or loaded. The slot
                stays empty so a later call retries.
        """
        material = self._material
        if material is not None:
            return material
        with self._lock:
            if self._material is None:
                self._material = self._create()
            return self._material

    @abstractmethod
    def _create(self) -> SigningKeyData:
        """Produce the key material. Called at most once per successful init."""


class EphemeralKeyProvider(KeyProvider):
    """Generates a fresh RSA-2048 key and kid once per process."""

    def _create(self) -> SigningKeyData:
        try:
            material = generate_rsa_keypair()
        except (ValueError, TypeError) as exc:
            raise KeyMaterialError(f"RSA key generation failed: {exc}") from exc
        logger.info("Generated ephemeral signing key kid=%s", material.kid)
        return material


class FixedKeyProvider(KeyProvider):
    """Loads a deployment-supplied RSA key so every instance shares one kid."""

    def __init__(
        self,
        private_key_pem: str = "",
        path: str = "",
        kid: str = "",
        encryption_key: str = "",
    ) -> None:
        super().__init__()
        self._private_key_pem = private_key_pem
        self._path = path
        self._kid = kid
        self._encryption_key = encryption_key

    def _read_pem(self) -> str:
        if self._private_key_pem:
            # Single-line env values carry escaped newlines.
            return self._private_key_pem.replace("\\n", "\n")
        if not self._path:
            raise KeyMaterialError(
                "Fixed key mode requires SIGNING_KEY_PEM or SIGNING_KEY_PATH"
            )
        try:
            return Path(self._path).read_text(encoding="utf-8")
        except OSError as exc:
            raise KeyMaterialError(
                f"Cannot read signing key from {self._path}: {exc}"
            ) from exc

    def _create(self) -> SigningKeyData:
        pem = self._read_pem()
        if self._encryption_key:
            try:
                pem = decrypt_private_key(pem.strip(), self._encryption_key)
            except (InvalidToken, ValueError) as exc:
                raise KeyMaterialError("Cannot decrypt signing key") from exc
        try:
            material = load_rsa_keypair(pem, self._kid)
        except (ValueError, TypeError) as exc:
            raise KeyMaterialError(f"Invalid signing key: {exc}") from exc
        logger.info("Loaded fixed signing key kid=%s", material.kid)
        return material


def build_key_provider(settings: ProviderSettings) -> KeyProvider:
    """Select the key provider for the configured key mode."""
    if settings.key_mode == "fixed":
        return FixedKeyProvider(
            private_key_pem=settings.signing_key_pem,
            path=settings.signing_key_path,
            kid=settings.signing_key_kid,
            encryption_key=settings.signing_key_encryption_key,
        )
    return EphemeralKeyProvider()
