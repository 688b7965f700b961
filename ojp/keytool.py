"""Generate a signing key for fixed key mode.

Prints environment lines ready for a deployment's configuration:

    oauth-jwt-provider-keygen --generate-encryption-key > signing.env
"""

import argparse
import sys

from cryptography.fernet import Fernet

from ojp.crypto.keys import encrypt_private_key, generate_rsa_keypair, load_rsa_keypair


def build_env_lines(encryption_key: str = "", kid: str = "") -> list[str]:
    """Create a new RSA key and render it as ``NAME=value`` lines."""
    keypair = generate_rsa_keypair()
    # The stored kid is the thumbprint unless one is pinned.
    keypair = load_rsa_keypair(keypair.private_key_pem, kid)
    lines = ["KEY_MODE=fixed"]
    if encryption_key:
        encrypted = encrypt_private_key(keypair.private_key_pem, encryption_key)
        lines.append(f"SIGNING_KEY_PEM={encrypted}")
        lines.append(f"SIGNING_KEY_ENCRYPTION_KEY={encryption_key}")
    else:
        escaped = keypair.private_key_pem.strip().replace("\n", "\\n")
        lines.append(f"SIGNING_KEY_PEM={escaped}")
    lines.append(f"SIGNING_KEY_KID={keypair.kid}")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate an RSA signing key for KEY_MODE=fixed"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--encryption-key",
        default="",
        help="Fernet key used to encrypt the private key",
    )
    group.add_argument(
        "--generate-encryption-key",
        action="store_true",
        help="Create a new Fernet key and encrypt the private key with it",
    )
    parser.add_argument("--kid", default="", help="Pin the key id")
    args = parser.parse_args(argv)

    encryption_key = args.encryption_key
    if args.generate_encryption_key:
        encryption_key = Fernet.generate_key().decode()
    try:
        lines = build_env_lines(encryption_key, args.kid)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
