"""SQLAlchemy ORM models for stored records and their uniqueness keys."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class RecordModel(Base):
    """ORM model for the 'records' table, scoped per store by store_name."""

    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_name: Mapped[str] = mapped_column(String(100), nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # sqlite_autoincrement: ids are never reused after delete/clear
    __table_args__ = (
        Index("ix_records_store", "store_name"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<RecordModel(id={self.id}, store='{self.store_name}')>"


class RecordKeyModel(Base):
    """ORM model with one row per (store, unique field, normalized value)."""

    __tablename__ = "record_keys"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str] = mapped_column(String(320), nullable=False)
    record_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("records.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("store_name", "field", "value", name="uq_record_keys_value"),
        Index("ix_record_keys_record", "record_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecordKeyModel(store='{self.store_name}', "
            f"field='{self.field}', record_id={self.record_id})>"
        )
