from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    username: str        # case-sensitive, unique
    password_hash: str   # hex SHA-256 of salt + password
    salt: str            # hex, 16 random bytes

    @staticmethod
    def new(username: str, password_hash: str, salt: str) -> "User":
        return User(username=username, password_hash=password_hash, salt=salt)

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "password_hash": self.password_hash,
            "salt": self.salt,
        }


@dataclass(frozen=True)
class Session:
    token: str
    username: str
