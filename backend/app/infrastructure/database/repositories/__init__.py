from .record_repository import (
    SQLAlchemyRecordRepository,
    sqlalchemy_record_repository_factory,
)

__all__ = [
    "SQLAlchemyRecordRepository",
    "sqlalchemy_record_repository_factory",
]
