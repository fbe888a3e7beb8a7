from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import fields
from pathlib import Path
from .models import User
import json, logging, os

logger = logging.getLogger("vault.accounts")

# Get valid field names from User dataclass
_USER_FIELDS = {f.name for f in fields(User)}

def _make_user(data: Dict[str, Any]) -> User:
    """Create a User from dict, filtering out unknown fields for forwards compatibility."""
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    filtered = {k: v for k, v in data.items() if k in _USER_FIELDS}
    return User(**filtered)

class IStorage(ABC):
    @abstractmethod
    def load_users(self) -> List[User]: ...
    @abstractmethod
    def append_user(self, user: User) -> None: ...

class MemoryStorage(IStorage):
    """Non-durable registry, for tests and embedding."""

    def __init__(self, users: Optional[List[User]] = None):
        self._users: List[User] = list(users or [])

    def load_users(self) -> List[User]:
        return list(self._users)

    def append_user(self, user: User) -> None:
        self._users.append(user)

class JSONLinesStorage(IStorage):
    """Append-only registry: one JSON object per line, never rewritten."""

    def __init__(self, path: str | Path = "users.jsonl"):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load_users(self) -> List[User]:
        if not self.path.exists():
            return []  # first run
        users: List[User] = []
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    users.append(_make_user(json.loads(line)))
                except (ValueError, TypeError) as e:
                    logger.warning("Skipping malformed registry line %d in %s: %s", lineno, self.path, e)
        return users

    def append_user(self, user: User) -> None:
        record = (json.dumps(user.to_dict(), separators=(",", ":")) + "\n").encode("utf-8")
        with self.path.open("ab+") as f:
            # a crash can leave a torn last line; start ours on a fresh one
            if f.seek(0, os.SEEK_END) > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    record = b"\n" + record
            f.write(record)
            f.flush()
            os.fsync(f.fileno())
