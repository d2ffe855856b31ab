"""Concrete repository implementation for Record backed by SQLAlchemy."""

import copy
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces import RecordRepository, RecordRepositoryFactory
from app.domain.entities import Record
from app.infrastructure.database.base import Base
from app.infrastructure.database.models import RecordKeyModel, RecordModel


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SQLAlchemyRecordRepository(RecordRepository):
    """Implements the RecordRepository port for one store using an async session."""

    def __init__(self, session: AsyncSession, store_name: str):
        self._session = session
        self._store_name = store_name

    def _to_entity(self, model: RecordModel) -> Record:
        """Map ORM model → domain entity."""
        return Record(
            id=model.id,
            data=copy.deepcopy(model.data),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _key_models(self, record_id: int, keys: dict[str, str]) -> list[RecordKeyModel]:
        return [
            RecordKeyModel(
                store_name=self._store_name,
                field=field_name,
                value=value,
                record_id=record_id,
            )
            for field_name, value in keys.items()
        ]

    async def _get_model(self, record_id: int) -> RecordModel | None:
        model = await self._session.get(RecordModel, record_id)
        if model is None or model.store_name != self._store_name:
            return None
        return model

    async def ensure_schema(self) -> None:
        tables = [RecordModel.__table__, RecordKeyModel.__table__]
        await self._session.run_sync(
            lambda sync_session: Base.metadata.create_all(
                sync_session.connection(), tables=tables
            )
        )

    async def get_by_id(self, record_id: int) -> Record | None:
        model = await self._get_model(record_id)
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Record]:
        stmt = (
            select(RecordModel)
            .where(RecordModel.store_name == self._store_name)
            .order_by(RecordModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def find_key_owner(self, field: str, value: str) -> int | None:
        stmt = select(RecordKeyModel.record_id).where(
            RecordKeyModel.store_name == self._store_name,
            RecordKeyModel.field == field,
            RecordKeyModel.value == value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, record: Record, keys: dict[str, str]) -> Record:
        model = RecordModel(
            store_name=self._store_name,
            data=copy.deepcopy(record.data),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        self._session.add_all(self._key_models(model.id, keys))
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, record: Record, keys: dict[str, str]) -> Record:
        model = await self._get_model(record.id)
        if model is None:
            raise ValueError(f"Record {record.id} not found in store '{self._store_name}'")
        model.data = copy.deepcopy(record.data)
        model.updated_at = record.updated_at
        await self._session.execute(
            delete(RecordKeyModel).where(RecordKeyModel.record_id == record.id)
        )
        self._session.add_all(self._key_models(record.id, keys))
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, record_id: int) -> bool:
        model = await self._get_model(record_id)
        if model is None:
            return False
        await self._session.execute(
            delete(RecordKeyModel).where(RecordKeyModel.record_id == record_id)
        )
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def clear(self) -> int:
        await self._session.execute(
            delete(RecordKeyModel).where(RecordKeyModel.store_name == self._store_name)
        )
        result = await self._session.execute(
            delete(RecordModel).where(RecordModel.store_name == self._store_name)
        )
        return result.rowcount or 0

    async def count(self) -> int:
        stmt = (
            select(func.count())
            .select_from(RecordModel)
            .where(RecordModel.store_name == self._store_name)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def usage_bytes(self) -> int:
        stmt = select(RecordModel.data).where(RecordModel.store_name == self._store_name)
        result = await self._session.execute(stmt)
        return sum(
            len(json.dumps(data, ensure_ascii=False).encode("utf-8"))
            for data in result.scalars().all()
        )


def sqlalchemy_record_repository_factory(
    session_factory: async_sessionmaker[AsyncSession],
    store_name: str,
) -> RecordRepositoryFactory:
    """Build a unit-of-work factory: one session per call, commit on success, rollback on error."""

    @asynccontextmanager
    async def _unit_of_work() -> AsyncIterator[RecordRepository]:
        async with session_factory() as session:
            try:
                yield SQLAlchemyRecordRepository(session, store_name)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return _unit_of_work
