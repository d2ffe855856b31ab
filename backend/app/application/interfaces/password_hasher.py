"""Abstract password hasher (port). The hash is opaque to everything else."""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """Port for one-way password hashing.

    ``max_password_bytes`` is the longest UTF-8 encoded password the
    algorithm accepts, or None when there is no limit.
    """

    max_password_bytes: int | None = None

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return an opaque hash string for *password*."""
        ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """True if *password* matches *password_hash*."""
        ...
