"""RedisCoinCache — concrete implementation of CoinCacheProtocol.

Key:   coin:{coin_id}
Value: JSON of every Coin field, timestamps as ISO-8601 with offset
TTL:   settings.COIN_CACHE_TTL_SECONDS (15 minutes), set with the value
"""

import redis.asyncio as aioredis
from pydantic import TypeAdapter

from config.settings import settings
from src.mc_coin.domain.models import Coin
from src.mc_common.errors import CacheKeyNotFoundError
from src.mc_common.redis_client import get_redis

_KEY_PREFIX = "coin"

_coin_adapter: TypeAdapter[Coin] = TypeAdapter(Coin)


def coin_cache_key(coin_id: int) -> str:
    return f"{_KEY_PREFIX}:{coin_id}"


def encode_coin(coin: Coin) -> str:
    return _coin_adapter.dump_json(coin).decode()


def decode_coin(raw: str | bytes) -> Coin:
    return _coin_adapter.validate_json(raw)


class RedisCoinCache:
    def __init__(
        self,
        client: aioredis.Redis | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        # None → shared pool from get_redis(), resolved on first use
        self._client = client
        if ttl_seconds is None:
            ttl_seconds = settings.COIN_CACHE_TTL_SECONDS
        self._ttl_seconds = ttl_seconds

    async def _redis(self) -> aioredis.Redis:
        if self._client is None:
            self._client = await get_redis()
        return self._client

    async def set(self, coin: Coin) -> None:
        client = await self._redis()
        await client.set(coin_cache_key(coin.id), encode_coin(coin), ex=self._ttl_seconds)

    async def get(self, coin_id: int) -> Coin:
        client = await self._redis()
        key = coin_cache_key(coin_id)
        raw = await client.get(key)
        if raw is None:
            raise CacheKeyNotFoundError(key)
        return decode_coin(raw)

    async def delete(self, coin_id: int) -> None:
        client = await self._redis()
        await client.delete(coin_cache_key(coin_id))
