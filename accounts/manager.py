import logging
import threading
from typing import Dict, Optional

from crypto import generate_token
from errors import AlreadyExistsError, InvalidCredentialsError, StorageIOError

from .hashing import SaltedHasher
from .models import Session, User
from .storage import IStorage

logger = logging.getLogger("vault.accounts")

_UNKNOWN_USER_SALT = "00" * 16
_UNKNOWN_USER_HASH = "0" * 64


class AccountManager:
    """
    Owns the user registry and the session table.

    Users are loaded from ``storage`` once and appended to it on
    registration. Sessions live only in memory, so a restart logs everyone
    out. A single lock guards both tables; callers never see the raw maps.
    """

    def __init__(self, storage: IStorage, hasher: Optional[SaltedHasher] = None):
        self.storage = storage
        self.hasher = hasher or SaltedHasher()
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        self._sessions: Dict[str, Session] = {}
        self._load()

    def _load(self) -> None:
        for user in self.storage.load_users():
            # first record for a username wins
            self._users.setdefault(user.username, user)
        logger.info("Loaded %d user(s)", len(self._users))

    def register(self, username: str, password: str) -> User:
        """
        Create a new user. Input shape is validated by the caller.

        Raises:
            AlreadyExistsError: the username is taken; nothing is written
            StorageIOError: the registry could not be appended to
        """
        with self._lock:
            if username in self._users:
                raise AlreadyExistsError("Username already exists")
            pwd_hash, salt = self.hasher.hash(password)
            user = User.new(username=username, password_hash=pwd_hash, salt=salt)
            try:
                self.storage.append_user(user)
            except OSError as e:
                raise StorageIOError(f"Cannot write to users registry: {e}") from e
            self._users[username] = user

        logger.info("Registered user: %s", username)
        return user

    def login(self, username: str, password: str) -> str:
        """
        Authenticate and open a new session.

        Unknown user and wrong password raise the same error.
        """
        with self._lock:
            user = self._users.get(username)

        # records are immutable, so re-hashing can happen outside the lock.
        # Unknown users still pay for one hash so timing matches.
        if user is None:
            self.hasher.verify(_UNKNOWN_USER_HASH, _UNKNOWN_USER_SALT, password)
        if user is None or not self.hasher.verify(user.password_hash, user.salt, password):
            logger.warning("Failed login attempt for %r", username)
            raise InvalidCredentialsError()

        token = generate_token()
        with self._lock:
            self._sessions[token] = Session(token=token, username=username)

        logger.info("User logged in: %s", username)
        return token

    def validate(self, token: str) -> Optional[str]:
        """Return the username owning ``token``, or None."""
        with self._lock:
            session = self._sessions.get(token)
        return session.username if session else None

    def logout(self, token: str) -> None:
        with self._lock:
            session = self._sessions.pop(token, None)
        if session:
            logger.info("User logged out: %s", session.username)

    def user_exists(self, username: str) -> bool:
        with self._lock:
            return username in self._users

    def user_count(self) -> int:
        with self._lock:
            return len(self._users)

    def active_sessions(self, username: str) -> int:
        """Number of live tokens held by ``username``."""
        with self._lock:
            return sum(1 for s in self._sessions.values() if s.username == username)
