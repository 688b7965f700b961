"""RSA signing key generation, loading, encryption, and JWK conversion."""

import base64
import hashlib
import json

import uuid_utils
from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
)

from ojp.crypto.types import JWKEntry, SigningKeyData

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


def _keypair_from_private_key(private_key: RSAPrivateKey, kid: str) -> SigningKeyData:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return SigningKeyData(
        kid=kid, private_key_pem=private_pem, public_key_pem=public_pem
    )


def generate_rsa_keypair() -> SigningKeyData:
    """Generate a new RSA-2048 keypair with a random kid."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    return _keypair_from_private_key(private_key, str(uuid_utils.uuid4()))


def load_rsa_keypair(private_key_pem: str, kid: str = "") -> SigningKeyData:
    """Load a PEM RSA private key.

    When ``kid`` is empty the RFC 7638 thumbprint of the public key is used,
    so the same key always yields the same kid.

    Raises:
        ValueError: If the PEM is malformed or not an RSA key.
    """
    loaded = serialization.load_pem_private_key(private_key_pem.encode(), password=None)
    if not isinstance(loaded, RSAPrivateKey):
        raise ValueError("Signing key is not an RSA private key")
    keypair = _keypair_from_private_key(loaded, kid)
    if kid:
        return keypair
    thumbprint = jwk_thumbprint(pem_to_jwk_entry(keypair.public_key_pem, kid))
    return keypair.model_copy(update={"kid": thumbprint})


def encrypt_private_key(private_pem: str, fernet_key: str) -> str:
    """Encrypt a PEM private key with Fernet for storage in configuration."""
    cipher = Fernet(fernet_key.encode())
    return cipher.encrypt(private_pem.encode()).decode()


def decrypt_private_key(encrypted: str, fernet_key: str) -> str:
    """Decrypt a Fernet-encrypted PEM private key."""
    cipher = Fernet(fernet_key.encode())
    return cipher.decrypt(encrypted.encode()).decode()


def _int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def pem_to_jwk_entry(public_key_pem: str, kid: str) -> JWKEntry:
    """Convert a PEM public key to JWK format."""
    loaded = serialization.load_pem_public_key(public_key_pem.encode())
    if not isinstance(loaded, RSAPublicKey):
        raise ValueError("Public key is not an RSA key")
    numbers = loaded.public_numbers()
    return JWKEntry(
        kid=kid,
        n=_int_to_base64url(numbers.n),
        e=_int_to_base64url(numbers.e),
    )


def jwk_thumbprint(jwk: JWKEntry) -> str:
    """RFC 7638 SHA-256 thumbprint over the required RSA members."""
    canonical = json.dumps(
        {"e": jwk.e, "kty": jwk.kty, "n": jwk.n},
        separators=(",", ":"),
        sort_keys=True,
    )
    digest = hashlib.sha256(canonical.encode()).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()
