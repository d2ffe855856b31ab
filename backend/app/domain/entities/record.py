"""Domain entities for the record store: pure Python objects, no persistence concerns."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

RESERVED_FIELDS = frozenset({"id", "created", "updated"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Record:
    """One stored entity (a contact or a user).

    ``data`` holds the user-visible fields; ``id`` and the timestamps are
    owned by the store and never taken from caller input.
    """

    data: dict[str, Any]
    id: int | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def copy(self) -> "Record":
        """Return an independent deep copy."""
        return Record(
            data=copy.deepcopy(self.data),
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_dict(self, exclude: frozenset[str] | set[str] = frozenset()) -> dict[str, Any]:
        """Flatten into the plain read model: id, fields, created, updated."""
        result: dict[str, Any] = {"id": self.id}
        result.update(
            {k: copy.deepcopy(v) for k, v in self.data.items() if k not in exclude}
        )
        result["created"] = self.created_at.isoformat()
        result["updated"] = self.updated_at.isoformat()
        return result


@dataclass
class ImportResult:
    """Outcome of a bulk import."""

    imported_count: int = 0
    skipped_count: int = 0


@dataclass
class ExportDocument:
    """Snapshot of a store plus metadata, ready for JSON serialization."""

    version: int
    database_name: str
    exported_at: datetime
    records: list[dict[str, Any]]

    @property
    def count(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "databaseName": self.database_name,
            "exportedAt": self.exported_at.isoformat(),
            "count": self.count,
            "records": self.records,
        }


@dataclass
class StorageUsage:
    """Storage usage report. ``available`` is False when usage cannot be measured."""

    available: bool
    usage_bytes: int = 0
    quota_bytes: int = 0
    percentage: float = 0.0
    level: str = "unknown"  # ok / warning / critical / unknown

    @classmethod
    def unavailable(cls) -> "StorageUsage":
        return cls(available=False)

    @classmethod
    def measured(cls, usage_bytes: int, quota_bytes: int) -> "StorageUsage":
        percentage = round(usage_bytes / quota_bytes * 100, 1) if quota_bytes > 0 else 0.0
        if percentage > 90:
            level = "critical"
        elif percentage > 70:
            level = "warning"
        else:
            level = "ok"
        return cls(
            available=True,
            usage_bytes=usage_bytes,
            quota_bytes=quota_bytes,
            percentage=percentage,
            level=level,
        )
