"""
Redis post store used in production.

The whole post list lives as a JSON string under a single key. The
client is created lazily so that importing the module never opens a
connection.
"""

import json
import logging

from redis.asyncio import Redis

from src.services.storage.base import BasePostStore

logger = logging.getLogger(__name__)


class RedisPostStore(BasePostStore):
    """Key-value backed post store.

    Args:
        url: Redis connection string, e.g. ``redis://localhost:6379/0``.
        key: Key holding the JSON array of posts.
        seed: Initialize a missing key with the demo posts.
        client: Optional pre-built client (used in tests).
    """

    def __init__(
        self,
        url: str,
        key: str = "comm-it:posts",
        seed: bool = True,
        client: Redis | None = None,
    ) -> None:
        super().__init__(seed=seed)
        self._url = url
        self._key = key
        self._client = client

    def _get_client(self) -> Redis:
        if self._client is None:
            logger.info("Connecting to Redis for key %s", self._key)
            self._client = Redis.from_url(self._url, decode_responses=True)
        return self._client

    async def _read(self) -> list[dict] | None:
        raw = await self._get_client().get(self._key)
        if not raw:
            return None
        return json.loads(raw)

    async def _write(self, documents: list[dict]) -> None:
        await self._get_client().set(self._key, json.dumps(documents))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
