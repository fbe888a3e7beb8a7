"""
Error taxonomy shared by every vault component.

Each error carries a stable ``kind`` so a transport boundary can report
failures as a structured outcome without inspecting exception types.
"""

from typing import Any, Dict


class VaultError(Exception):
    kind = "VaultError"
    default_message = "Vault operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Structured outcome in the same shape the protocol returns."""
        return {"success": False, "kind": self.kind, "message": self.message}


class ValidationError(VaultError, ValueError):
    kind = "ValidationError"
    default_message = "Invalid request"


class AlreadyExistsError(VaultError, ValueError):
    kind = "AlreadyExists"
    default_message = "Username already exists"


class InvalidCredentialsError(VaultError):
    kind = "InvalidCredentials"
    default_message = "Invalid username or password"


class UnauthorizedError(VaultError):
    kind = "Unauthorized"
    default_message = "Unauthorized, please login first"


class NotFoundError(VaultError):
    kind = "NotFound"
    default_message = "File not found"


class StorageIOError(VaultError):
    kind = "IOError"
    default_message = "Storage failure"


# Crypto engine

class RandomSourceError(VaultError):
    kind = "RandomSourceError"
    default_message = "Secure random source unavailable"


class InputTooShortError(VaultError, ValueError):
    kind = "InputTooShortError"
    default_message = "Ciphertext too short, missing IV"


class AuthenticationOrCorruptionError(VaultError, ValueError):
    kind = "AuthenticationOrCorruptionError"
    default_message = "Decryption failed, wrong password or corrupted data"
