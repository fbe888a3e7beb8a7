"""
Client side of the vault.

Files are encrypted before they are handed to the service and decrypted
after they come back, so the service only ever sees ciphertext.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from crypto import decrypt, encrypt
from errors import UnauthorizedError
from .protocol import VaultService

logger = logging.getLogger("vault.client")


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _default_download_dir(username: str) -> Path:
    return Path.home() / "Downloads" / username


class VaultClient:
    def __init__(self, service: VaultService):
        self.service = service
        self.token: Optional[str] = None
        self.username: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _require_token(self) -> str:
        if not self.token:
            raise UnauthorizedError("Not authenticated")
        return self.token

    def register(self, username: str, password: str) -> None:
        self.service.register(username, password)

    def login(self, username: str, password: str) -> str:
        self.token = self.service.login(username, password)
        self.username = username
        return self.token

    def logout(self) -> None:
        if self.token:
            self.service.logout(self.token)
        self.token = None
        self.username = None

    def upload_file(self, filepath: str, password: str) -> str:
        """
        Encrypt a local file with ``password`` and upload it under its base
        name. Returns the name the service stored it as.
        """
        token = self._require_token()
        src = Path(filepath).expanduser()
        if not src.is_file():
            raise FileNotFoundError(f"{filepath} is not a file")

        encrypted = encrypt(src.read_bytes(), password)
        stored = self.service.upload(token, src.name, encrypted)
        logger.info("Uploaded %s as %s", src.name, stored)
        return stored

    def download_file(
        self,
        filename: str,
        password: str,
        dest_dir: Optional[str] = None,
    ) -> Path:
        """
        Download ``filename``, decrypt it and write the plaintext.

        The ``.enc`` suffix is dropped from the output name. When
        ``dest_dir`` is omitted the file goes to ``~/Downloads/<username>``.
        Decryption errors propagate and nothing is written.
        """
        token = self._require_token()
        blob = self.service.download(token, filename)
        plaintext = decrypt(blob, password)

        if dest_dir:
            target_dir = _ensure_dir(Path(dest_dir).expanduser())
        else:
            target_dir = _ensure_dir(_default_download_dir(self.username or "anonymous"))

        suffix = self.service.settings.encrypted_suffix
        output_name = filename[: -len(suffix)] if filename.endswith(suffix) else filename
        target_path = target_dir / (output_name or filename)
        target_path.write_bytes(plaintext)
        logger.info("Downloaded and decrypted %s", target_path)
        return target_path

    def list_files(self) -> List[Dict[str, Any]]:
        return self.service.list_files(self._require_token())
