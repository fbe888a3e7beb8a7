"""
Vault protocol: the operations a transport exposes to clients.

Each operation validates its input, authenticates bearer tokens through the
account manager and delegates storage to the blob store. Payloads are
already encrypted by the client and are stored and returned verbatim.

``VaultService.call`` is the RPC-style entry point: it returns a dict with
``success`` set and, for failures, the error ``kind`` and ``message``.
"""

import inspect
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from accounts.manager import AccountManager
from config import Settings
from errors import UnauthorizedError, ValidationError, VaultError
from storage.file_manager import (
    list_files as _list_objects,
    retrieve_file,
    store_file,
)

logger = logging.getLogger("vault.protocol")

_USERNAME_RE = re.compile(r"[A-Za-z0-9_.\-]+")
_BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` value."""
    if not header or not header.startswith(_BEARER_PREFIX):
        return ""
    return header[len(_BEARER_PREFIX):].strip()


class VaultService:
    def __init__(
        self,
        accounts: AccountManager,
        *,
        vault_root: Optional[Path] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.accounts = accounts
        self.vault_root = Path(vault_root or self.settings.storage_dir)
        self.vault_root.mkdir(parents=True, exist_ok=True)
        logger.info("Storage directory: %s", self.vault_root)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _require_strings(**values: Any) -> None:
        for name, value in values.items():
            if not isinstance(value, str) or not value:
                raise ValidationError("Username and password are required")

    def _validate_registration(self, username: str, password: str) -> None:
        self._require_strings(username=username, password=password)
        s = self.settings
        if len(username) < s.min_username_length or len(password) < s.min_password_length:
            raise ValidationError(
                f"Username (min {s.min_username_length}) and "
                f"password (min {s.min_password_length}) too short"
            )
        if username in (".", "..") or not _USERNAME_RE.fullmatch(username):
            raise ValidationError(
                "Username may only contain letters, digits, '.', '_' and '-'"
            )

    @staticmethod
    def _validate_filename(logical_name: Any) -> str:
        if not isinstance(logical_name, str) or not logical_name:
            raise ValidationError("Filename is required")
        if (
            logical_name in (".", "..")
            or "/" in logical_name
            or "\\" in logical_name
            or "\x00" in logical_name
        ):
            raise ValidationError(f"Invalid filename: {logical_name!r}")
        return logical_name

    def _authenticate(self, token: Optional[str]) -> str:
        username = self.accounts.validate(token) if token else None
        if username is None:
            raise UnauthorizedError()
        return username

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register(self, username: str, password: str) -> None:
        self._validate_registration(username, password)
        self.accounts.register(username, password)

    def login(self, username: str, password: str) -> str:
        self._require_strings(username=username, password=password)
        return self.accounts.login(username, password)

    def upload(self, token: str, logical_name: str, data: bytes) -> str:
        """Store already-encrypted bytes; returns the canonical stored name."""
        username = self._authenticate(token)
        self._validate_filename(logical_name)
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ValidationError("No file provided")
        return store_file(
            username,
            logical_name,
            bytes(data),
            vault_root=self.vault_root,
            suffix=self.settings.encrypted_suffix,
        )

    def download(self, token: str, logical_name: str) -> bytes:
        """Return the stored (still encrypted) bytes."""
        username = self._authenticate(token)
        self._validate_filename(logical_name)
        return retrieve_file(
            username,
            logical_name,
            vault_root=self.vault_root,
            suffix=self.settings.encrypted_suffix,
        )

    def list_files(self, token: str) -> List[Dict[str, Any]]:
        username = self._authenticate(token)
        return [entry.to_dict() for entry in _list_objects(username, vault_root=self.vault_root)]

    def logout(self, token: str) -> None:
        if token:
            self.accounts.logout(token)

    def health(self) -> Dict[str, Any]:
        return {"status": "running"}

    # ------------------------------------------------------------------
    # RPC dispatch
    # ------------------------------------------------------------------

    def call(self, operation: str, **params: Any) -> Dict[str, Any]:
        """
        Run an operation by name and report the outcome as a dict.

        Every ``VaultError`` becomes ``{"success": False, "kind", "message"}``;
        anything else propagates.
        """
        handlers: Dict[str, Callable[..., Dict[str, Any]]] = {
            "register": self._rpc_register,
            "login": self._rpc_login,
            "upload": self._rpc_upload,
            "download": self._rpc_download,
            "list": self._rpc_list,
            "logout": self._rpc_logout,
            "health": self._rpc_health,
        }
        handler = handlers.get(operation)
        try:
            if handler is None:
                raise ValidationError(f"Unknown operation: {operation}")
            try:
                inspect.signature(handler).bind(**params)
            except TypeError as e:
                raise ValidationError(f"Invalid request: {e}") from e
            result = handler(**params)
        except VaultError as e:
            logger.debug("%s failed: %s (%s)", operation, e.kind, e.message)
            return e.to_dict()
        result["success"] = True
        return result

    def _rpc_register(self, username: Any = "", password: Any = "") -> Dict[str, Any]:
        self.register(username, password)
        return {"message": "User registered successfully"}

    def _rpc_login(self, username: Any = "", password: Any = "") -> Dict[str, Any]:
        token = self.login(username, password)
        return {"token": token, "message": "Login successful"}

    def _rpc_upload(self, token: str = "", filename: Any = "", data: Any = None) -> Dict[str, Any]:
        stored = self.upload(token, filename, data)
        return {"message": "File uploaded successfully", "filename": stored}

    def _rpc_download(self, token: str = "", filename: Any = "") -> Dict[str, Any]:
        return {"data": self.download(token, filename)}

    def _rpc_list(self, token: str = "") -> Dict[str, Any]:
        files = self.list_files(token)
        return {"files": files, "count": len(files)}

    def _rpc_logout(self, token: str = "") -> Dict[str, Any]:
        self.logout(token)
        return {"message": "Logged out"}

    def _rpc_health(self) -> Dict[str, Any]:
        return self.health()
