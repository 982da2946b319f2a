"""Domain models for mc_coin — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Coin:
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    popularity_score: int = 0


@dataclass
class NewCoin:
    """Client-supplied fields of a coin that does not exist yet."""

    name: str
    description: str = ""
