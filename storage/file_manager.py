from pathlib import Path
import logging
import os
import tempfile
from typing import List

from errors import NotFoundError, StorageIOError
from .models import StoredObjectInfo

logger = logging.getLogger("vault.storage")

VAULT_ROOT = Path("storage")
ENCRYPTED_SUFFIX = ".enc"

# In-flight uploads; never listed
_PARTIAL_SUFFIX = ".part"


# ============================================================================
# Helper methods
# ============================================================================

def _check_component(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"{what} cannot be empty")
    if value in (".", "..") or "/" in value or "\\" in value or "\x00" in value:
        raise ValueError(f"{what} must be a plain name: {value!r}")
    return value


def canonical_name(logical_name: str, suffix: str = ENCRYPTED_SUFFIX) -> str:
    """Name an object has on disk: the encrypted suffix, exactly once."""
    _check_component(logical_name, "filename")
    if logical_name.endswith(suffix):
        return logical_name
    return logical_name + suffix


def _user_dir(owner: str, root: Path = VAULT_ROOT) -> Path:
    return Path(root) / _check_component(owner, "owner")


def _object_path(owner: str, logical_name: str, root: Path, suffix: str) -> Path:
    return _user_dir(owner, root) / canonical_name(logical_name, suffix)


# ============================================================================
# Public operations
# ============================================================================

def store_file(
    owner: str,
    logical_name: str,
    data: bytes,
    *,
    vault_root: Path = VAULT_ROOT,
    suffix: str = ENCRYPTED_SUFFIX,
) -> str:
    """
    Write an object verbatim, replacing any previous object with the same
    canonical name.

    The bytes go to a temporary file first and are moved into place, so a
    failed write leaves the previous object intact.

    Returns:
        The canonical stored name
    """
    target = _object_path(owner, logical_name, vault_root, suffix)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".", suffix=_PARTIAL_SUFFIX, dir=str(target.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            Path(tmp).replace(target)
        finally:
            Path(tmp).unlink(missing_ok=True)
    except OSError as e:
        logger.error("Error storing %s for %s: %s", target.name, owner, e)
        raise StorageIOError(f"Failed to store file: {e}") from e

    logger.info("Stored file: %s (%d bytes)", target, len(data))
    return target.name


def retrieve_file(
    owner: str,
    logical_name: str,
    *,
    vault_root: Path = VAULT_ROOT,
    suffix: str = ENCRYPTED_SUFFIX,
) -> bytes:
    """Read an object back verbatim."""
    path = _object_path(owner, logical_name, vault_root, suffix)
    try:
        return path.read_bytes()
    except (FileNotFoundError, IsADirectoryError):
        raise NotFoundError(f"File not found: {logical_name}")
    except OSError as e:
        raise StorageIOError(f"Failed to read file: {e}") from e


def list_files(owner: str, *, vault_root: Path = VAULT_ROOT) -> List[StoredObjectInfo]:
    """List every object stored for an owner, in filesystem order."""
    user_dir = _user_dir(owner, vault_root)
    if not user_dir.is_dir():
        return []  # nothing stored yet

    entries = []
    for path in user_dir.iterdir():
        if path.name.endswith(_PARTIAL_SUFFIX):
            continue
        try:
            if not path.is_file():
                continue
            entries.append(StoredObjectInfo.from_path(path))
        except FileNotFoundError:
            continue  # replaced or removed while listing
    return entries


def file_exists(
    owner: str,
    logical_name: str,
    *,
    vault_root: Path = VAULT_ROOT,
    suffix: str = ENCRYPTED_SUFFIX,
) -> bool:
    return _object_path(owner, logical_name, vault_root, suffix).is_file()
