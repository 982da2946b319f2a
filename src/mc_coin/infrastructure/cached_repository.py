"""CachedCoinRepository — cache-aside over CoinDAO + RedisCoinCache.

PostgreSQL is the source of truth; Redis only ever holds snapshots of
committed rows.

Reads:  cache → on miss, ANY cache error, or a cache read slower than
        CACHE_READ_TIMEOUT_MS fall through to the DB, then repopulate the
        cache in the background.
Writes: DB (committed) → invalidate the cache entry in the background.

Background cache work runs on cache_task_runner: detached from the request
task, bounded by CACHE_TASK_TIMEOUT_MS, failures logged and dropped. A
read racing an in-flight invalidation may still see the old snapshot;
the TTL bounds how long that can last.

Only persistence errors escape this class (DuplicateCoinNameError,
CoinNotFoundError, CoinStoreError).
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mc_coin.domain.cache import CoinCacheProtocol
from src.mc_coin.domain.models import Coin, NewCoin
from src.mc_coin.domain.repository import CoinDAOProtocol
from src.mc_coin.infrastructure.cache import RedisCoinCache
from src.mc_coin.infrastructure.persistence import CoinDAO
from src.mc_common.background import BackgroundTaskRunner
from src.mc_common.errors import CacheKeyNotFoundError

logger = logging.getLogger(__name__)

cache_task_runner = BackgroundTaskRunner(
    timeout=settings.CACHE_TASK_TIMEOUT_MS / 1000,
    name="coin-cache",
)


class CachedCoinRepository:
    def __init__(
        self,
        dao: CoinDAOProtocol | None = None,
        cache: CoinCacheProtocol | None = None,
        runner: BackgroundTaskRunner | None = None,
        read_timeout: float | None = None,
    ) -> None:
        self._dao: CoinDAOProtocol = dao or CoinDAO()
        self._cache: CoinCacheProtocol = cache or RedisCoinCache()
        self._runner = runner or cache_task_runner
        if read_timeout is None:
            read_timeout = settings.CACHE_READ_TIMEOUT_MS / 1000
        self._read_timeout = read_timeout

    async def create(self, db: AsyncSession, new_coin: NewCoin) -> Coin:
        # Not cached here: the first find_by_id populates it
        return await self._dao.insert(db, new_coin)

    async def update(self, db: AsyncSession, coin: Coin) -> None:
        await self._dao.update_by_id(db, coin)
        self._invalidate("delete after update", coin.id)

    async def find_by_id(self, db: AsyncSession, coin_id: int) -> Coin:
        try:
            async with asyncio.timeout(self._read_timeout):
                return await self._cache.get(coin_id)
        except CacheKeyNotFoundError:
            pass
        except Exception:
            logger.warning(
                "coin cache read failed, falling back to db coin_id=%s",
                coin_id,
                exc_info=True,
                extra={"coin_id": coin_id},
            )

        coin = await self._dao.find_by_id(db, coin_id)
        self._runner.spawn("set after db read", coin_id, self._cache.set(coin))
        return coin

    async def delete_by_id(self, db: AsyncSession, coin_id: int) -> None:
        await self._dao.delete_by_id(db, coin_id)
        self._invalidate("delete after delete", coin_id)

    async def incr_popularity_score(self, db: AsyncSession, coin_id: int) -> None:
        await self._dao.incr_popularity_score(db, coin_id)
        self._invalidate("delete after popularity increment", coin_id)

    def _invalidate(self, operation: str, coin_id: int) -> None:
        self._runner.spawn(operation, coin_id, self._cache.delete(coin_id))
