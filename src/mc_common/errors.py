"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Coin
  9xxx: System

Every AppError carries an ErrorKind so callers branch on the kind of
failure instead of matching on messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    STORE_FAILURE = "STORE_FAILURE"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    INTERNAL = "INTERNAL"


class AppError(Exception):
    """Base application error."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Coin ---

class DuplicateCoinNameError(AppError):
    kind = ErrorKind.DUPLICATE_NAME

    def __init__(self, name: str) -> None:
        super().__init__(1001, f"Coin name already exists: {name}", 409)


class CoinNotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, coin_id: int) -> None:
        self.coin_id = coin_id
        super().__init__(1002, f"Coin not found: {coin_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class CoinStoreError(AppError):
    """Any persistence failure that is neither a duplicate nor a missing row.

    The underlying driver error is chained as __cause__; the client only
    ever sees the generic message.
    """

    kind = ErrorKind.STORE_FAILURE

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(9003, "Internal server error", 500)


class CacheKeyNotFoundError(AppError):
    """Cache miss. Absorbed by the repository, never reaches a client."""

    kind = ErrorKind.KEY_NOT_FOUND

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(9101, f"Cache key not found: {key}", 500)
