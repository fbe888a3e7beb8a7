"""
Configuration for the encrypted vault.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """Vault settings."""

    # Durable state
    data_dir: Path = field(default_factory=lambda: Path(os.getenv("VAULT_DATA_DIR", "data")))
    storage_dir: Path = field(default_factory=lambda: Path(os.getenv("VAULT_STORAGE_DIR", "storage")))
    users_file: str = "users.jsonl"

    # Every stored object carries this suffix on disk
    encrypted_suffix: str = ".enc"

    # Registration rules
    min_username_length: int = field(default_factory=lambda: _env_int("VAULT_MIN_USERNAME", 3))
    min_password_length: int = field(default_factory=lambda: _env_int("VAULT_MIN_PASSWORD", 4))

    log_level: str = field(default_factory=lambda: os.getenv("VAULT_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()

    @property
    def users_path(self) -> Path:
        return Path(self.data_dir) / self.users_file


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the vault loggers.

    A root handler is installed only when the application has none yet;
    the level is always applied to the ``vault`` logger namespace.
    """
    resolved = getattr(logging, str(level).upper(), None)
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    logging.getLogger("vault").setLevel(resolved)
