"""
utils/crypto.py
---------------
Random secret material for round entries (tokens, tickets, keys).
Backed by the operating system's CSPRNG through the `secrets` module.
"""

import base64
import secrets

from config import AES_KEY_BYTES


class SecretGenerationError(Exception):
    """Random secret material could not be produced."""


def gen_bytes(n: int) -> bytes:
    """
    Return `n` cryptographically random bytes.

    Raises:
        SecretGenerationError: If `n` is not positive or the entropy
            source fails.
    """
    if n <= 0:
        raise SecretGenerationError(f"secret size must be positive, got {n}")
    try:
        return secrets.token_bytes(n)
    except OSError as e:
        raise SecretGenerationError(f"entropy source failed: {e}") from e


def gen_string(n: int) -> str:
    """`n` random bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(gen_bytes(n)).rstrip(b"=").decode("ascii")


def gen_key(n: int = AES_KEY_BYTES) -> bytes:
    """A raw symmetric key, 32 bytes (AES-256) unless configured otherwise."""
    return gen_bytes(n)
