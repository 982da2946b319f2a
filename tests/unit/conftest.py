"""Unit-test fixtures: in-memory stand-ins for the coin DAO and cache.

Both honour the same Protocols as the real PostgreSQL / Redis adapters and
count every call, so tests can assert which backend a repository operation
touched and how many times.
"""

import asyncio
from collections import Counter
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from src.mc_coin.domain.models import Coin, NewCoin
from src.mc_coin.infrastructure.cache import coin_cache_key, decode_coin, encode_coin
from src.mc_coin.infrastructure.cached_repository import CachedCoinRepository
from src.mc_common.background import BackgroundTaskRunner
from src.mc_common.datetime_utils import utc_now_ms
from src.mc_common.errors import (
    CacheKeyNotFoundError,
    CoinNotFoundError,
    DuplicateCoinNameError,
)


class FakeCoinDAO:
    def __init__(self) -> None:
        self.rows: dict[int, Coin] = {}
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}
        self._next_id = 1

    def _maybe_fail(self, op: str) -> None:
        self.calls[op] += 1
        if op in self.errors:
            raise self.errors[op]

    def _get(self, coin_id: int) -> Coin:
        if coin_id not in self.rows:
            raise CoinNotFoundError(coin_id)
        return self.rows[coin_id]

    async def insert(self, db: object, new_coin: NewCoin) -> Coin:
        self._maybe_fail("insert")
        if any(c.name == new_coin.name for c in self.rows.values()):
            raise DuplicateCoinNameError(new_coin.name)
        now = utc_now_ms()
        coin = Coin(
            id=self._next_id,
            name=new_coin.name,
            description=new_coin.description,
            created_at=now,
            updated_at=now,
            popularity_score=0,
        )
        self._next_id += 1
        self.rows[coin.id] = coin
        return replace(coin)

    async def update_by_id(self, db: object, coin: Coin) -> None:
        self._maybe_fail("update_by_id")
        stored = self._get(coin.id)
        self.rows[coin.id] = replace(
            stored,
            description=coin.description,
            updated_at=max(stored.updated_at, utc_now_ms()),
        )

    async def find_by_id(self, db: object, coin_id: int) -> Coin:
        self._maybe_fail("find_by_id")
        return replace(self._get(coin_id))

    async def delete_by_id(self, db: object, coin_id: int) -> None:
        self._maybe_fail("delete_by_id")
        self._get(coin_id)
        del self.rows[coin_id]

    async def incr_popularity_score(self, db: object, coin_id: int) -> None:
        self._maybe_fail("incr_popularity_score")
        # Suspend first so concurrent pokes interleave like real requests
        await asyncio.sleep(0)
        stored = self._get(coin_id)
        self.rows[coin_id] = replace(
            stored,
            popularity_score=stored.popularity_score + 1,
            updated_at=max(stored.updated_at, utc_now_ms()),
        )


class FakeCoinCache:
    """Stores the same JSON the Redis adapter writes, keyed the same way."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}

    def _maybe_fail(self, op: str) -> None:
        self.calls[op] += 1
        if op in self.errors:
            raise self.errors[op]

    async def set(self, coin: Coin) -> None:
        self._maybe_fail("set")
        self.store[coin_cache_key(coin.id)] = encode_coin(coin)

    async def get(self, coin_id: int) -> Coin:
        self._maybe_fail("get")
        key = coin_cache_key(coin_id)
        if key not in self.store:
            raise CacheKeyNotFoundError(key)
        return decode_coin(self.store[key])

    async def delete(self, coin_id: int) -> None:
        self._maybe_fail("delete")
        self.store.pop(coin_cache_key(coin_id), None)


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def fake_dao() -> FakeCoinDAO:
    return FakeCoinDAO()


@pytest.fixture
def fake_cache() -> FakeCoinCache:
    return FakeCoinCache()


@pytest.fixture
def runner() -> BackgroundTaskRunner:
    return BackgroundTaskRunner(timeout=0.1, name="test-cache")


@pytest.fixture
def repo(fake_dao, fake_cache, runner) -> CachedCoinRepository:
    return CachedCoinRepository(dao=fake_dao, cache=fake_cache, runner=runner)
