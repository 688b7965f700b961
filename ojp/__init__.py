"""OAuth JWT provider: private_key_jwt tokens, JWKS, and client metadata."""

__version__ = "0.1.0"
