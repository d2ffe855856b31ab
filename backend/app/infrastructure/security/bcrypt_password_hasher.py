"""bcrypt adapter for the PasswordHasher port."""

import logging

import bcrypt

from app.application.interfaces import PasswordHasher

logger = logging.getLogger(__name__)


class BcryptPasswordHasher(PasswordHasher):
    """Salted bcrypt hashes; the cost factor comes from settings."""

    max_password_bytes = 72

    def __init__(self, rounds: int = 10):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > self.max_password_bytes:
            raise ValueError(f"password is longer than {self.max_password_bytes} bytes")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        if not password_hash or len(encoded) > self.max_password_bytes:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False
