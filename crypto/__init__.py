"""Cryptography utilities for encrypted file storage."""

from .primitives import (
    generate_salt,
    generate_iv,
    generate_token,
    hash_password,
    derive_key,
    constant_time_equals,
)

from .cipher import (
    encrypt,
    decrypt,
)

__all__ = [
    # Hashing and randomness
    "generate_salt",
    "generate_iv",
    "generate_token",
    "hash_password",
    "derive_key",
    "constant_time_equals",
    # AES-256-CBC
    "encrypt",
    "decrypt",
]
