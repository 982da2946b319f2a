"""CoinDAO — concrete implementation of CoinDAOProtocol.

All queries use raw text() SQL (no ORM).
Every write commits before returning: the cached repository only touches
Redis after this returns, so an invalidation can never precede the commit
it is invalidating for. On any driver error the session is rolled back.

Error translation:
  - UNIQUE(name) violation (SQLSTATE 23505)  → DuplicateCoinNameError
  - no row matched by id                     → CoinNotFoundError
  - anything else raised by SQLAlchemy, or an
    OSError from the driver (refused / reset
    connection)                              → CoinStoreError
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_coin.domain.models import Coin, NewCoin
from src.mc_common.datetime_utils import utc_now_ms
from src.mc_common.errors import CoinNotFoundError, CoinStoreError, DuplicateCoinNameError

_UNIQUE_VIOLATION = "23505"

# asyncpg surfaces socket failures while connecting as bare OSError
_STORE_ERRORS = (SQLAlchemyError, OSError)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_INSERT_COIN_SQL = text("""
    INSERT INTO meme_coins (name, description, popularity_score, created_at, updated_at)
    VALUES (:name, :description, 0, :created_at, :updated_at)
    RETURNING id, name, description, popularity_score, created_at, updated_at
""")

_UPDATE_COIN_SQL = text("""
    UPDATE meme_coins
    SET description = :description,
        updated_at = GREATEST(updated_at, :now)
    WHERE id = :id
""")

_GET_COIN_SQL = text("""
    SELECT id, name, description, popularity_score, created_at, updated_at
    FROM meme_coins
    WHERE id = :id
""")

_DELETE_COIN_SQL = text("DELETE FROM meme_coins WHERE id = :id")

# Single statement: concurrent pokes serialize on the row lock, none is lost.
_INCR_POPULARITY_SQL = text("""
    UPDATE meme_coins
    SET popularity_score = popularity_score + 1,
        updated_at = GREATEST(updated_at, :now)
    WHERE id = :id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_coin(row: object) -> Coin:
    return Coin(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description or "",  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
        popularity_score=row.popularity_score,  # type: ignore[attr-defined]
    )


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg's own exception sits under SQLAlchemy's adapted one
    for err in (exc.orig, getattr(exc.orig, "__cause__", None)):
        if getattr(err, "sqlstate", None) == _UNIQUE_VIOLATION:
            return True
    return False


@asynccontextmanager
async def _translate_errors(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    try:
        yield
    except _STORE_ERRORS as exc:
        await db.rollback()
        raise CoinStoreError(operation) from exc


# ---------------------------------------------------------------------------
# DAO
# ---------------------------------------------------------------------------


class CoinDAO:
    """Stateless; the session is passed per call by the repository."""

    async def insert(self, db: AsyncSession, new_coin: NewCoin) -> Coin:
        now = utc_now_ms()
        try:
            result = await db.execute(
                _INSERT_COIN_SQL,
                {
                    "name": new_coin.name,
                    "description": new_coin.description or None,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            row = result.fetchone()
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            if _is_unique_violation(exc):
                raise DuplicateCoinNameError(new_coin.name) from exc
            raise CoinStoreError("insert") from exc
        except _STORE_ERRORS as exc:
            await db.rollback()
            raise CoinStoreError("insert") from exc
        return _row_to_coin(row)

    async def update_by_id(self, db: AsyncSession, coin: Coin) -> None:
        async with _translate_errors(db, "update_by_id"):
            result = await db.execute(
                _UPDATE_COIN_SQL,
                {
                    "id": coin.id,
                    "description": coin.description or None,
                    "now": utc_now_ms(),
                },
            )
            await db.commit()
        if result.rowcount == 0:
            raise CoinNotFoundError(coin.id)

    async def find_by_id(self, db: AsyncSession, coin_id: int) -> Coin:
        async with _translate_errors(db, "find_by_id"):
            result = await db.execute(_GET_COIN_SQL, {"id": coin_id})
            row = result.fetchone()
        if row is None:
            raise CoinNotFoundError(coin_id)
        return _row_to_coin(row)

    async def delete_by_id(self, db: AsyncSession, coin_id: int) -> None:
        async with _translate_errors(db, "delete_by_id"):
            result = await db.execute(_DELETE_COIN_SQL, {"id": coin_id})
            await db.commit()
        if result.rowcount == 0:
            raise CoinNotFoundError(coin_id)

    async def incr_popularity_score(self, db: AsyncSession, coin_id: int) -> None:
        async with _translate_errors(db, "incr_popularity_score"):
            result = await db.execute(
                _INCR_POPULARITY_SQL, {"id": coin_id, "now": utc_now_ms()}
            )
            await db.commit()
        # Zero rows: no coin with this id
        if result.rowcount == 0:
            raise CoinNotFoundError(coin_id)
