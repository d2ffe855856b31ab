"""Shared fixtures: in-memory SQLite record stores and an API client wired to them."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.services import AuthService
from app.domain.entities import CONTACT_SCHEMA, USER_SCHEMA
from app.infrastructure.database import build_engine, build_session_factory
from app.infrastructure.dependencies import (
    build_record_store,
    get_auth_service,
    get_contact_store,
    get_user_store,
)
from app.infrastructure.security import BcryptPasswordHasher
from app.main import create_app


@pytest.fixture
async def session_factory():
    engine = build_engine("sqlite://")
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def contact_store(session_factory):
    store = build_record_store(CONTACT_SCHEMA, session_factory)
    await store.initialize()
    return store


@pytest.fixture
async def user_store(session_factory):
    store = build_record_store(USER_SCHEMA, session_factory)
    await store.initialize()
    return store


@pytest.fixture
async def client(contact_store, user_store):
    app = create_app()
    app.dependency_overrides[get_contact_store] = lambda: contact_store
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_auth_service] = lambda: AuthService(
        user_store, BcryptPasswordHasher(rounds=4)
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
