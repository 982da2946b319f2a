"""Coin snapshot cache contract.

Cache-aside rules the repository follows on top of this:
  - Cache key: f"coin:{coin_id}", fixed 15 minute TTL
  - Write: DB first (committed), then invalidate in the background
  - Read: cache → DB on miss or on any cache error → populate in the background

get() raises CacheKeyNotFoundError on a miss. Any other exception means
the cache itself is unhealthy; callers treat both the same way.
"""

from typing import Protocol

from src.mc_coin.domain.models import Coin


class CoinCacheProtocol(Protocol):
    async def set(self, coin: Coin) -> None: ...

    async def get(self, coin_id: int) -> Coin: ...

    async def delete(self, coin_id: int) -> None: ...
