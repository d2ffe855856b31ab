from .record_repository import RecordRepository, RecordRepositoryFactory
from .password_hasher import PasswordHasher

__all__ = [
    "RecordRepository",
    "RecordRepositoryFactory",
    "PasswordHasher",
]
