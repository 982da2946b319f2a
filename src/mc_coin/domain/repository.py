"""Repository Protocols — dependency inversion for testability.

CoinDAOProtocol is the persistence store (PostgreSQL is the source of
truth). CoinRepositoryProtocol is what the application service consumes:
the same CRUD + poke surface with the cache folded in behind it.

Unit tests inject fakes or mocks that conform to these Protocols.
The infrastructure layer provides the real implementations.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_coin.domain.models import Coin, NewCoin


class CoinDAOProtocol(Protocol):
    async def insert(self, db: AsyncSession, new_coin: NewCoin) -> Coin: ...

    async def update_by_id(self, db: AsyncSession, coin: Coin) -> None: ...

    async def find_by_id(self, db: AsyncSession, coin_id: int) -> Coin: ...

    async def delete_by_id(self, db: AsyncSession, coin_id: int) -> None: ...

    async def incr_popularity_score(self, db: AsyncSession, coin_id: int) -> None: ...


class CoinRepositoryProtocol(Protocol):
    async def create(self, db: AsyncSession, new_coin: NewCoin) -> Coin: ...

    async def update(self, db: AsyncSession, coin: Coin) -> None: ...

    async def find_by_id(self, db: AsyncSession, coin_id: int) -> Coin: ...

    async def delete_by_id(self, db: AsyncSession, coin_id: int) -> None: ...

    async def incr_popularity_score(self, db: AsyncSession, coin_id: int) -> None: ...
