"""FastAPI dependency injection: wires infrastructure to application layer.

Record stores are built once per application (they own the write lock
that serializes mutations) and kept on ``app.state``; request handlers
receive them through the providers below.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.application.services import AuthService, RecordStore
from app.domain.entities import RecordSchema
from app.infrastructure.database.repositories import sqlalchemy_record_repository_factory
from app.infrastructure.security import BcryptPasswordHasher


def build_record_store(
    schema: RecordSchema,
    session_factory: async_sessionmaker[AsyncSession],
) -> RecordStore:
    """Create a RecordStore for *schema* backed by SQLAlchemy sessions."""
    settings = get_settings()
    return RecordStore(
        schema=schema,
        repository_factory=sqlalchemy_record_repository_factory(session_factory, schema.name),
        quota_bytes=settings.storage_quota_bytes,
    )


def get_contact_store(request: Request) -> RecordStore:
    """Provides the application's contacts store."""
    return request.app.state.contact_store


def get_user_store(request: Request) -> RecordStore:
    """Provides the application's users store."""
    return request.app.state.user_store


def get_auth_service(
    user_store: RecordStore = Depends(get_user_store),
) -> AuthService:
    """Provides an AuthService over the users store with bcrypt hashing."""
    settings = get_settings()
    return AuthService(
        user_store=user_store,
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        min_password_length=settings.min_password_length,
    )
