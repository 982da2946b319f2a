"""Pydantic schemas for mc_coin API requests and responses."""

from pydantic import BaseModel, Field

from src.mc_coin.domain.models import Coin


class CreateCoinRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=128)


class UpdateCoinRequest(BaseModel):
    description: str = Field(..., max_length=128)


class CoinDetail(BaseModel):
    id: int
    name: str
    description: str
    created_at: str
    updated_at: str
    popularity_score: int

    @classmethod
    def from_domain(cls, c: Coin) -> "CoinDetail":
        return cls(
            id=c.id,
            name=c.name,
            description=c.description,
            created_at=c.created_at.isoformat(),
            updated_at=c.updated_at.isoformat(),
            popularity_score=c.popularity_score,
        )
