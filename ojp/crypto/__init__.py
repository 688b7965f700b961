"""RSA key material and JWT signing."""
