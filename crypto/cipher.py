"""
AES-256-CBC file encryption.

Blob layout: the first 16 bytes are the IV, the rest is the AES-256-CBC
ciphertext of the PKCS#7-padded plaintext. The format carries no MAC, so a
wrong password and a corrupted blob are reported the same way.
"""

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from errors import AuthenticationOrCorruptionError, InputTooShortError
from .primitives import IV_SIZE, derive_key, generate_iv

BLOCK_BITS = algorithms.AES.block_size  # 128


def encrypt(plaintext: bytes, password: str) -> bytes:
    """
    Encrypt data for storage.

    Every call uses a fresh IV, so encrypting the same input twice gives
    different blobs.

    Args:
        plaintext: Raw file content (may be empty)
        password: Encryption password; the key is derived from it

    Returns:
        ``IV || ciphertext``
    """
    key = derive_key(password)
    iv = generate_iv()

    padder = padding.PKCS7(BLOCK_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return iv + ciphertext


def decrypt(blob: bytes, password: str) -> bytes:
    """
    Decrypt a blob produced by ``encrypt``.

    Raises:
        InputTooShortError: blob is shorter than the IV
        AuthenticationOrCorruptionError: wrong password or corrupted data
    """
    if len(blob) < IV_SIZE:
        raise InputTooShortError(
            f"Ciphertext too short, missing IV ({len(blob)} < {IV_SIZE} bytes)"
        )

    iv, body = blob[:IV_SIZE], blob[IV_SIZE:]
    key = derive_key(password)

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()

        unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        # Bad padding or a body that is not whole AES blocks
        raise AuthenticationOrCorruptionError() from exc
