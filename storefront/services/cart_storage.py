# storefront/services/cart_storage.py
import json
from abc import ABC, abstractmethod

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, GUEST_CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartStorage(ABC):
    """
    Where a guest cart lives between requests. Lines are stored as the
    plain JSON-ready dicts produced by CartContext.
    """

    @abstractmethod
    def load(self, key: str) -> list[dict] | None:
        ...

    @abstractmethod
    def save(self, key: str, lines: list[dict]) -> None:
        ...

    @abstractmethod
    def clear(self, key: str) -> None:
        ...


class InMemoryCartStorage(CartStorage):
    def __init__(self):
        self._carts: dict[str, list[dict]] = {}

    def load(self, key: str) -> list[dict] | None:
        lines = self._carts.get(key)
        return [dict(line) for line in lines] if lines is not None else None

    def save(self, key: str, lines: list[dict]) -> None:
        self._carts[key] = [dict(line) for line in lines]

    def clear(self, key: str) -> None:
        self._carts.pop(key, None)


class RedisCartStorage(CartStorage):
    """
    One JSON string per guest under guest-cart:<key>, refreshed TTL on every
    write. Last write wins, there is no locking between tabs.
    """

    def __init__(self, url: str | None = None, ttl: int = GUEST_CART_TTL_SECONDS, client=None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(key: str) -> str:
        return f"guest-cart:{key}"

    @redis_retry()
    def load(self, key: str) -> list[dict] | None:
        raw = self.redis.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    @redis_retry()
    def save(self, key: str, lines: list[dict]) -> None:
        self.redis.set(name=self._key(key), value=json.dumps(lines), ex=self.ttl)

    @redis_retry()
    def clear(self, key: str) -> None:
        self.redis.delete(self._key(key))
