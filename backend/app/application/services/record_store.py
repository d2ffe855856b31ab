"""RecordStore: keyed record storage with uniqueness constraints, search and bulk import/export.

One store manages one record kind, described by a ``RecordSchema``. All
persistence goes through a ``RecordRepository`` unit of work obtained from
the injected factory, so the same store runs on SQLAlchemy in production and
on an in-memory fake in unit tests.

Mutations are serialized by an ``asyncio.Lock`` held across the uniqueness
check and the write, so two concurrent creates with the same constrained
value can never both succeed.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from app.application.interfaces import RecordRepository, RecordRepositoryFactory
from app.domain.entities import (
    RESERVED_FIELDS,
    ExportDocument,
    ImportResult,
    Record,
    RecordSchema,
    StorageUsage,
)
from app.domain.entities.record_schema import is_empty
from app.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
    StoreNotInitializedError,
)

logger = logging.getLogger(__name__)


class RecordStore:
    """Application service owning every record of one kind."""

    def __init__(
        self,
        schema: RecordSchema,
        repository_factory: RecordRepositoryFactory,
        quota_bytes: int = 0,
    ) -> None:
        self._schema = schema
        self._repository_factory = repository_factory
        self._quota_bytes = quota_bytes
        self._ready = False
        self._write_lock = asyncio.Lock()

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @property
    def is_ready(self) -> bool:
        return self._ready

    # ── Lifecycle ────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create backing storage if needed and mark the store ready."""
        async with self._repository_factory() as repo:
            await repo.ensure_schema()
        self._ready = True
        logger.info("Record store '%s' initialized", self._schema.name)

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotInitializedError(self._schema.name)

    # ── Helpers ──────────────────────────────────────────────────────

    def _prepare(self, fields: Any) -> dict[str, Any]:
        """Drop store-owned keys, type-check declared fields and normalize the rest."""
        if not isinstance(fields, Mapping):
            raise RecordValidationError(
                self._schema.entity_type, "record must be a mapping of field names to values"
            )
        data = {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}
        wrong = self._schema.non_text_fields(data)
        if wrong:
            raise RecordValidationError(
                self._schema.entity_type,
                f"field(s) must be text: {', '.join(wrong)}",
                wrong,
            )
        return self._schema.normalize(data)

    def _validate(self, data: Mapping[str, Any]) -> None:
        missing = self._schema.missing_required(data)
        if missing:
            raise RecordValidationError(
                self._schema.entity_type,
                f"required field(s) missing or empty: {', '.join(missing)}",
                missing,
            )

    async def _check_unique(
        self,
        repo: RecordRepository,
        keys: Mapping[str, str],
        exclude_id: int | None = None,
    ) -> None:
        for field_name, value in keys.items():
            owner = await repo.find_key_owner(field_name, value)
            if owner is not None and owner != exclude_id:
                logger.info(
                    "Rejected %s write: duplicate %s", self._schema.name, field_name
                )
                raise DuplicateEntityError(self._schema.entity_type, field_name, value)

    def _matches(self, record: Record, needle: str) -> bool:
        return any(
            isinstance(value, str) and needle in value.lower()
            for key, value in record.data.items()
            if key not in self._schema.private_fields
        )

    # ── CRUD ─────────────────────────────────────────────────────────

    async def create(self, fields: Mapping[str, Any]) -> Record:
        """Validate, normalize and persist a new record.

        Raises:
            RecordValidationError: a required field is missing or empty, or a
                declared field holds a non-text value.
            DuplicateEntityError: a unique field collides with a live record.
        """
        self._require_ready()
        data = self._prepare(fields)
        self._validate(data)
        keys = self._schema.unique_keys(data)

        async with self._write_lock:
            async with self._repository_factory() as repo:
                await self._check_unique(repo, keys)
                now = datetime.now(timezone.utc)
                record = await repo.create(
                    Record(data=data, created_at=now, updated_at=now), keys
                )

        logger.info("Created %s record id=%s", self._schema.name, record.id)
        return record

    async def get(self, record_id: int) -> Record:
        self._require_ready()
        async with self._repository_factory() as repo:
            record = await repo.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError(self._schema.entity_type, record_id)
        return record

    async def list_records(self) -> list[Record]:
        """Snapshot of all live records in insertion order."""
        self._require_ready()
        async with self._repository_factory() as repo:
            return await repo.get_all()

    async def update(self, record_id: int, patch: Mapping[str, Any]) -> Record:
        """Merge *patch* over an existing record.

        Fields absent from *patch* are kept; a ``None`` value removes the
        field. ``id`` and ``created`` never change, ``updated`` is refreshed.
        On any error the stored record is left untouched.
        """
        self._require_ready()
        changes = self._prepare(patch)

        async with self._write_lock:
            async with self._repository_factory() as repo:
                existing = await repo.get_by_id(record_id)
                if existing is None:
                    raise EntityNotFoundError(self._schema.entity_type, record_id)

                merged = dict(existing.data)
                for key, value in changes.items():
                    if value is None:
                        merged.pop(key, None)
                    else:
                        merged[key] = value
                self._validate(merged)

                keys = self._schema.unique_keys(merged)
                await self._check_unique(repo, keys, exclude_id=record_id)

                existing.data = merged
                existing.updated_at = max(datetime.now(timezone.utc), existing.created_at)
                record = await repo.update(existing, keys)

        logger.info("Updated %s record id=%s", self._schema.name, record_id)
        return record

    async def delete(self, record_id: int) -> None:
        self._require_ready()
        async with self._write_lock:
            async with self._repository_factory() as repo:
                deleted = await repo.delete(record_id)
        if not deleted:
            raise EntityNotFoundError(self._schema.entity_type, record_id)
        logger.info("Deleted %s record id=%s", self._schema.name, record_id)

    async def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        self._require_ready()
        async with self._write_lock:
            async with self._repository_factory() as repo:
                removed = await repo.clear()
        logger.info("Cleared %d %s record(s)", removed, self._schema.name)
        return removed

    async def count(self) -> int:
        self._require_ready()
        async with self._repository_factory() as repo:
            return await repo.count()

    # ── Lookup ───────────────────────────────────────────────────────

    async def search(self, term: str | None) -> list[Record]:
        """Case-insensitive substring search across every text field.

        The term is trimmed first; an empty or whitespace-only term returns
        the full listing.
        """
        records = await self.list_records()
        if term is None or not term.strip():
            return records
        needle = term.strip().lower()
        return [r for r in records if self._matches(r, needle)]

    async def find_by(self, field_name: str, value: Any) -> Record | None:
        """Return the record holding *value* in unique field *field_name*, or None."""
        self._require_ready()
        if field_name not in self._schema.unique_fields:
            raise ValueError(f"'{field_name}' is not a unique field of {self._schema.name}")
        normalized = self._schema.normalize_value(field_name, value)
        if is_empty(normalized):
            return None

        async with self._repository_factory() as repo:
            owner = await repo.find_key_owner(field_name, str(normalized))
            if owner is None:
                return None
            return await repo.get_by_id(owner)

    # ── Import / Export ──────────────────────────────────────────────

    async def import_batch(self, candidates: Iterable[Any]) -> ImportResult:
        """Create each candidate in order, skipping duplicates and invalid entries.

        Any error other than a duplicate or a validation failure aborts the
        batch and propagates; records imported before it stay committed.
        """
        self._require_ready()
        result = ImportResult()
        for position, candidate in enumerate(candidates):
            try:
                await self.create(candidate)
            except (DuplicateEntityError, RecordValidationError) as exc:
                result.skipped_count += 1
                logger.info(
                    "Skipped %s import candidate #%d: %s", self._schema.name, position, exc
                )
            else:
                result.imported_count += 1

        logger.info(
            "Imported %d %s record(s), skipped %d",
            result.imported_count,
            self._schema.name,
            result.skipped_count,
        )
        return result

    async def import_document(self, document: Any) -> ImportResult:
        """Validate an export-format document, then import its records."""
        self._require_ready()
        if not isinstance(document, Mapping) or not isinstance(document.get("records"), list):
            raise RecordValidationError(
                self._schema.entity_type,
                "invalid import document: a 'records' array is required",
                ["records"],
            )
        return await self.import_batch(document["records"])

    async def export_all(self) -> ExportDocument:
        records = await self.list_records()
        return ExportDocument(
            version=self._schema.version,
            database_name=self._schema.database_name,
            exported_at=datetime.now(timezone.utc),
            records=[r.to_dict() for r in records],
        )

    # ── Storage ──────────────────────────────────────────────────────

    async def storage_usage(self) -> StorageUsage:
        """Report storage usage against the configured quota.

        Never raises: before initialization, or when the backend cannot
        measure usage, the report is marked unavailable.
        """
        if not self._ready:
            return StorageUsage.unavailable()
        try:
            async with self._repository_factory() as repo:
                used = await repo.usage_bytes()
        except Exception:
            logger.warning(
                "Could not measure storage usage for '%s'", self._schema.name, exc_info=True
            )
            return StorageUsage.unavailable()
        return StorageUsage.measured(used, self._quota_bytes)
