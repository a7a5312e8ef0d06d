"""SQL database post store (single-row key/value document)."""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from src.services.storage.base import BasePostStore
from src.services.storage.database import (
    create_engine_for_url,
    create_session_factory,
    init_db,
    session_scope,
)
from src.services.storage.models_db import KVDocument

logger = logging.getLogger(__name__)


class SQLPostStore(BasePostStore):
    """Stores the post list as one JSON row in ``kv_documents``.

    The engine is created lazily from ``url``; tables are created on first
    access.

    Args:
        url: SQLAlchemy async database URL, e.g. ``sqlite+aiosqlite:///data/comm_it.db``.
        key: Row key holding the JSON array of posts.
        seed: Initialize a missing row with the demo posts.
        engine: Optional pre-built engine (used in tests). It is not
            disposed by :meth:`close`.
    """

    def __init__(
        self,
        url: str | None = None,
        key: str = "posts",
        seed: bool = True,
        engine: AsyncEngine | None = None,
    ) -> None:
        super().__init__(seed=seed)
        if url is None and engine is None:
            raise ValueError("SQLPostStore needs a database URL or an engine")
        self._url = url
        self._key = key
        self._engine = engine
        self._owns_engine = engine is None
        self._session_factory = None
        self._schema_ready = False

    async def _sessions(self):
        if self._engine is None:
            logger.info("Opening database %s", self._url)
            self._engine = create_engine_for_url(self._url)
        if not self._schema_ready:
            await init_db(self._engine)
            self._schema_ready = True
        if self._session_factory is None:
            self._session_factory = create_session_factory(self._engine)
        return self._session_factory

    async def _read(self) -> list[dict] | None:
        async with session_scope(await self._sessions()) as session:
            row = await session.get(KVDocument, self._key)
            if row is None:
                return None
            return json.loads(row.value)

    async def _write(self, documents: list[dict]) -> None:
        async with session_scope(await self._sessions()) as session:
            row = await session.get(KVDocument, self._key)
            if row is None:
                session.add(KVDocument(key=self._key, value=json.dumps(documents)))
            else:
                row.value = json.dumps(documents)

    async def close(self) -> None:
        if self._owns_engine and self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        self._session_factory = None
        self._schema_ready = False
