"""Storage module for per-user encrypted objects."""

from .file_manager import (
    ENCRYPTED_SUFFIX,
    canonical_name,
    store_file,
    retrieve_file,
    list_files,
    file_exists,
)
from .models import StoredObjectInfo

__all__ = [
    "ENCRYPTED_SUFFIX",
    "canonical_name",
    "store_file",
    "retrieve_file",
    "list_files",
    "file_exists",
    "StoredObjectInfo",
]
