import logging
from typing import Dict, List, Optional

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Durable string key-value slots (favorites lists, per-order records).

    Redis is the primary store when REDIS_URL is set and reachable; otherwise,
    or after the first redis error, everything lives in process RAM.
    """

    def __init__(self, redis_url: Optional[str] = None):
        self.redis = None
        self.redis_available = False

        # 1. Primary Memory (Redis)
        if redis_url:
            try:
                self.redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=1  # Fail fast if Redis is down
                )
                self.redis.ping()
                self.redis_available = True
                print("✅ LocalStore: Connected to Redis.")
            except (RedisError, ValueError) as e:
                print(f"⚠️ LocalStore: Redis unreachable ({e}). Using RAM fallback.")
                self.redis_available = False

        # 2. Fallback Memory (RAM)
        self._memory_store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        if self.redis_available:
            try:
                value = self.redis.get(key)
                if value is not None:
                    return value
            except RedisError as e:
                self._handle_redis_error(e)

        return self._memory_store.get(key)

    def set(self, key: str, value: str):
        if self.redis_available:
            try:
                self.redis.set(key, value)
            except RedisError as e:
                self._handle_redis_error(e)

        # Always write to RAM so a later redis failure does not lose the slot
        self._memory_store[key] = value

    def delete(self, key: str):
        if self.redis_available:
            try:
                self.redis.delete(key)
            except RedisError as e:
                self._handle_redis_error(e)

        self._memory_store.pop(key, None)

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self, prefix: str) -> List[str]:
        found = {k for k in self._memory_store if k.startswith(prefix)}
        if self.redis_available:
            try:
                found.update(self.redis.scan_iter(match=f"{prefix}*"))
            except RedisError as e:
                self._handle_redis_error(e)
        return sorted(found)

    def _handle_redis_error(self, e):
        """Log error and switch flag to False to stop trying Redis for a while."""
        logger.error(f"❌ Redis Error: {e}. Switching to RAM mode.")
        self.redis_available = False
