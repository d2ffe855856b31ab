"""Application service for user registration and login over the users record store."""

import asyncio
import logging

from app.application.interfaces import PasswordHasher
from app.application.services.record_store import RecordStore
from app.domain.entities import Record
from app.domain.exceptions import InvalidCredentialsError, RecordValidationError

logger = logging.getLogger(__name__)


class AuthService:
    """Hash-and-compare authentication. Depends on the users store and a hasher (DI).

    Hashing is CPU-bound, so it runs in a worker thread to keep the event
    loop serving other requests.
    """

    def __init__(
        self,
        user_store: RecordStore,
        password_hasher: PasswordHasher,
        min_password_length: int = 6,
    ) -> None:
        self._users = user_store
        self._hasher = password_hasher
        self._min_password_length = min_password_length

    def _check_password(self, password: str) -> None:
        if len(password or "") < self._min_password_length:
            raise RecordValidationError(
                "User",
                f"password must be at least {self._min_password_length} characters",
                ["password"],
            )
        limit = self._hasher.max_password_bytes
        if limit is not None and len(password.encode("utf-8")) > limit:
            raise RecordValidationError(
                "User", f"password must be at most {limit} bytes", ["password"]
            )

    async def register(self, username: str, password: str, email: str | None = None) -> Record:
        """Create a user with a hashed password.

        Raises:
            RecordValidationError: username missing, password too short or too long.
            DuplicateEntityError: username or email already taken.
        """
        self._check_password(password)
        password_hash = await asyncio.to_thread(self._hasher.hash, password)

        fields = {"username": username, "password_hash": password_hash}
        if email:
            fields["email"] = email
        user = await self._users.create(fields)
        logger.info("Registered user id=%s", user.id)
        return user

    async def login(self, username: str, password: str) -> Record:
        """Return the user record if *password* matches its stored hash."""
        user = await self._users.find_by("username", username)
        if user is None:
            raise InvalidCredentialsError("User not found")
        matches = await asyncio.to_thread(
            self._hasher.verify, password, user.data.get("password_hash", "")
        )
        if not matches:
            logger.info("Failed login for user id=%s", user.id)
            raise InvalidCredentialsError("Wrong password")
        return user
