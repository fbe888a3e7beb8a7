from typing import Tuple

from crypto import constant_time_equals, generate_salt, hash_password


class SaltedHasher:
    def hash(self, password: str) -> Tuple[str, str]:
        """Create a (digest, salt) pair for a new password."""
        salt = generate_salt()
        return hash_password(password, salt), salt

    def verify(self, stored_hash: str, salt: str, password: str) -> bool:
        """Check a password attempt against the stored hash."""
        return constant_time_equals(hash_password(password, salt), stored_hash)
