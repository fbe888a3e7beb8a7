from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


def _iso_from_timestamp(ts: float) -> str:
    """Consistent ISO-8601 timestamp (UTC, seconds precision)."""
    return (
        datetime.fromtimestamp(ts, tz=timezone.utc)
        .isoformat(timespec="seconds")
        .replace("+00:00", "Z")
    )


@dataclass
class StoredObjectInfo:
    """
    Metadata for one encrypted object in a user's directory.

    `logical_name` is the canonical on-disk name, including the encrypted
    suffix. The content itself is never inspected.
    """

    logical_name: str
    size: int
    last_modified: str

    @classmethod
    def from_path(cls, path: Path) -> "StoredObjectInfo":
        st = path.stat()
        return cls(
            logical_name=path.name,
            size=st.st_size,
            last_modified=_iso_from_timestamp(st.st_mtime),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredObjectInfo":
        return cls(
            logical_name=data["logical_name"],
            size=data["size"],
            last_modified=data["last_modified"],
        )
