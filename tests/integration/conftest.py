"""Integration-test fixtures.

Requires PostgreSQL + Redis (docker compose up) and migrations applied
(alembic upgrade head). When either is unreachable the whole directory is
skipped rather than failed.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created lazily on first
use) remain valid across the entire test session.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.main import app
from src.mc_common.database import engine
from src.mc_common.redis_client import get_redis


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _backends_available() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM meme_coins LIMIT 1"))
        await (await get_redis()).ping()
    except (OSError, SQLAlchemyError, RedisError) as exc:
        pytest.skip(f"PostgreSQL/Redis not available: {exc}")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
