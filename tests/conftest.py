import os

# must be set before shipspace.core.config is imported
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("INTERNAL_ADMIN_KEY", "test-internal")

import httpx
import pytest

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Import Base + all models so metadata is complete
from shipspace.models import Base
from shipspace.core.security import generate_api_key
from shipspace.main import app
from shipspace.services.auth import Actor
from shipspace.store.base import ProfileRecord
from shipspace.store.deps import get_store
from shipspace.store.memory import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
async def seller(store: InMemoryStore) -> Actor:
    await store.upsert_profile(ProfileRecord(
        id="usr_seller", company_name="Canton Freight", contact_person="Li Wei", phone="+86 20 1234",
    ))
    return Actor(user_id="usr_seller")


@pytest.fixture
async def buyer(store: InMemoryStore) -> Actor:
    await store.upsert_profile(ProfileRecord(
        id="usr_buyer", company_name="Oran Motors", contact_person="Amine B.", phone="+213 41 0000",
    ))
    return Actor(user_id="usr_buyer")


@pytest.fixture
async def admin(store: InMemoryStore) -> Actor:
    await store.upsert_profile(ProfileRecord(
        id="usr_admin", company_name="Shipspace", contact_person="Moderator", phone="+213 21 0000", is_admin=True,
    ))
    return Actor(user_id="usr_admin", is_admin=True)


@pytest.fixture
def issue_key(store: InMemoryStore):
    """
    Register an API key for an existing user id and return the plain key.
    """
    async def _issue(user_id: str) -> str:
        key = generate_api_key()
        await store.insert_api_key(user_id=user_id, key_prefix=key.prefix, key_hash=key.hashed)
        return key.plain

    return _issue


@pytest.fixture
async def client(store: InMemoryStore):
    """
    HTTP client with the in-memory store swapped in via dependency override.
    """
    async def _override_get_store():
        return store

    app.dependency_overrides[get_store] = _override_get_store

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def _test_db_url() -> str:
    url = os.getenv("DATABASE_URL_TEST")
    if not url:
        pytest.skip("DATABASE_URL_TEST is not set")
    return url


@pytest.fixture
async def async_engine():
    engine = create_async_engine(_test_db_url(), future=True, pool_pre_ping=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    """
    Transactional rollback per test:
    - Start an outer transaction
    - Start a nested transaction (SAVEPOINT)
    - Restart SAVEPOINT after each internal commit (SQLAlchemy pattern)
    """
    async with async_engine.connect() as conn:
        trans = await conn.begin()

        session_factory = async_sessionmaker(bind=conn, expire_on_commit=False, class_=AsyncSession)
        session = session_factory()

        await session.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def _restart_savepoint(sess, transaction):
            # If the nested transaction ended, start a new one
            parent = getattr(transaction, "_parent", None)
            if transaction.nested and parent is not None and not parent.nested:
                sess.begin_nested()

        try:
            yield session
        finally:
            await session.close()
            await trans.rollback()
