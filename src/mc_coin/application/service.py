"""CoinApplicationService — thin composition layer.

The caller (router) passes the db session; the service delegates to the
cached repository and maps domain objects to response schemas. Commits
happen inside the persistence layer, one per write.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_coin.application.schemas import CoinDetail
from src.mc_coin.domain.models import NewCoin
from src.mc_coin.domain.repository import CoinRepositoryProtocol
from src.mc_coin.infrastructure.cached_repository import CachedCoinRepository


class CoinApplicationService:
    def __init__(self, repo: CoinRepositoryProtocol | None = None) -> None:
        self._repo: CoinRepositoryProtocol = repo or CachedCoinRepository()

    async def create_coin(
        self, db: AsyncSession, name: str, description: str
    ) -> CoinDetail:
        coin = await self._repo.create(db, NewCoin(name=name, description=description))
        return CoinDetail.from_domain(coin)

    async def get_coin(self, db: AsyncSession, coin_id: int) -> CoinDetail:
        coin = await self._repo.find_by_id(db, coin_id)
        return CoinDetail.from_domain(coin)

    async def update_coin(
        self, db: AsyncSession, coin_id: int, description: str
    ) -> None:
        # Raises CoinNotFoundError before any write is attempted
        coin = await self._repo.find_by_id(db, coin_id)
        coin.description = description
        await self._repo.update(db, coin)

    async def delete_coin(self, db: AsyncSession, coin_id: int) -> None:
        await self._repo.delete_by_id(db, coin_id)

    async def poke_coin(self, db: AsyncSession, coin_id: int) -> None:
        await self._repo.incr_popularity_score(db, coin_id)
