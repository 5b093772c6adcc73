"""Shared fixtures: an in-memory SQLite database per test."""

import os

os.environ.setdefault("BOT_TOKEN", "123456:test-token")
os.environ.setdefault("DB_PASSWORD", "test")

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from splitter.database.base import Base
from splitter.database.models import Account, Profile
from splitter.services.auth_service import hash_password


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest.fixture
async def roommates(session):
    """Three profiles without login accounts."""
    profiles = [Profile(name=name) for name in ("Alice", "Bob", "Carol")]
    session.add_all(profiles)
    await session.flush()
    return profiles


@pytest.fixture
async def account_with_profile(session):
    account = Account(email="dana@example.com", password_hash=hash_password("secret1"))
    account.profile = Profile(name="Dana")
    session.add(account)
    await session.flush()
    return account
