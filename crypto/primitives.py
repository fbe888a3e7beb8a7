"""
Hashing, key derivation and secure random helpers.

Password digests are SHA-256 over ``salt || password``. The per-user salt
defeats precomputed tables but no key stretching is applied, so a stolen
registry is open to brute force. Encryption keys are a single SHA-256 pass
over the password with no salt so that any client holding the password
derives the same key. Both are known weaknesses kept for compatibility with
existing stored data.
"""

import os

from cryptography.hazmat.primitives import constant_time, hashes

from errors import RandomSourceError

SALT_SIZE = 16
IV_SIZE = 16
TOKEN_SIZE = 32
KEY_SIZE = 32  # AES-256


def random_bytes(size: int) -> bytes:
    """
    Read ``size`` bytes from the operating system CSPRNG.

    Raises:
        RandomSourceError: if the OS random source cannot be used. There is
            no fallback to a weaker generator.
    """
    try:
        data = os.urandom(size)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"Failed to read {size} random bytes: {exc}") from exc
    if len(data) != size:
        raise RandomSourceError(f"Short read from random source ({len(data)} of {size} bytes)")
    return data


def generate_salt() -> str:
    """Return a fresh 16-byte salt, hex-encoded."""
    return random_bytes(SALT_SIZE).hex()


def generate_iv() -> bytes:
    """Return a fresh 16-byte IV. Never reuse one under the same key."""
    return random_bytes(IV_SIZE)


def generate_token() -> str:
    """Return an unguessable session token (32 random bytes, hex-encoded)."""
    return random_bytes(TOKEN_SIZE).hex()


def sha256(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def hash_password(password: str, salt: str) -> str:
    """
    Hash a password with its salt.

    Args:
        password: The plaintext password
        salt: Hex salt from ``generate_salt``

    Returns:
        64-character hex SHA-256 digest of ``salt + password``
    """
    return sha256((salt + password).encode("utf-8", "surrogatepass")).hex()


def derive_key(password: str) -> bytes:
    """Derive the 32-byte AES key used to encrypt file contents."""
    return sha256(password.encode("utf-8", "surrogatepass"))


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two digests without leaking where they differ."""
    return constant_time.bytes_eq(a.encode("utf-8"), b.encode("utf-8"))
