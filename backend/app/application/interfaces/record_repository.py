"""Abstract repository interface (port) for Record persistence."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from app.domain.entities import Record


class RecordRepository(ABC):
    """Port for one store's records and their uniqueness keys.

    A repository instance is one unit of work: everything done through it
    is committed together when its context exits cleanly, and rolled back
    otherwise.
    """

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the backing tables if they do not exist yet."""
        ...

    @abstractmethod
    async def get_by_id(self, record_id: int) -> Record | None:
        """Retrieve a single record by id."""
        ...

    @abstractmethod
    async def get_all(self) -> list[Record]:
        """Retrieve every live record in insertion order."""
        ...

    @abstractmethod
    async def find_key_owner(self, field: str, value: str) -> int | None:
        """Return the id of the record holding the unique key, if any."""
        ...

    @abstractmethod
    async def create(self, record: Record, keys: dict[str, str]) -> Record:
        """Persist a new record with its unique keys; assigns the id."""
        ...

    @abstractmethod
    async def update(self, record: Record, keys: dict[str, str]) -> Record:
        """Overwrite an existing record and replace its unique keys."""
        ...

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def clear(self) -> int:
        """Delete every record. Returns the number removed."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def usage_bytes(self) -> int:
        """Approximate bytes taken by the serialized records."""
        ...


RecordRepositoryFactory = Callable[[], AbstractAsyncContextManager[RecordRepository]]
