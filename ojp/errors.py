"""Server-side failures surfaced to callers as ``server_error``."""


class ProviderError(Exception):
    """Base class for faults in key handling or token signing."""


class KeyMaterialError(ProviderError):
    """The signing key could not be generated, loaded, or decrypted."""


class TokenSigningError(ProviderError):
    """A claim set could not be signed."""
