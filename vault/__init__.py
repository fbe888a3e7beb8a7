"""Encrypted cloud vault: protocol boundary and client helper."""

from typing import Optional

from accounts.manager import AccountManager
from accounts.storage import JSONLinesStorage
from config import Settings, setup_logging

from .protocol import VaultService, extract_bearer_token
from .client import VaultClient


def create_service(settings: Optional[Settings] = None) -> VaultService:
    """Wire the durable registry, the account manager and the service."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    accounts = AccountManager(JSONLinesStorage(settings.users_path))
    return VaultService(accounts, vault_root=settings.storage_dir, settings=settings)


__all__ = [
    "VaultService",
    "VaultClient",
    "create_service",
    "extract_bearer_token",
]
