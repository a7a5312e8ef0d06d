"""
Abstract base class for post stores.

A store persists the whole post list as one JSON document. Concrete
backends only implement raw document I/O (``_read`` / ``_write``); the
base class handles seeding and model conversion.

A read that fails outright falls back to the seed data. A record that
does not validate is logged and skipped so the rest of the list survives.
Write errors are logged and swallowed.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from src.core.models import Post
from src.services.storage.seed import SEED_POSTS

logger = logging.getLogger(__name__)


class BasePostStore(ABC):
    """Interface that every post storage backend must implement."""

    def __init__(self, seed: bool = True) -> None:
        self._seed = seed

    def _initial_documents(self) -> list[dict]:
        return [dict(p) for p in SEED_POSTS] if self._seed else []

    @abstractmethod
    async def _read(self) -> list[dict] | None:
        """Return the stored document, or ``None`` if nothing was stored yet."""

    @abstractmethod
    async def _write(self, documents: list[dict]) -> None:
        """Replace the stored document."""

    async def close(self) -> None:
        """Release connections held by the backend (no-op by default)."""

    async def load(self) -> list[Post]:
        """Return all stored posts in stored order (most recent first)."""
        try:
            documents = await self._read()
            if documents is None:
                documents = self._initial_documents()
                if documents:
                    logger.info("Initializing %s with demo posts", type(self).__name__)
                    await self._write(documents)
            if not isinstance(documents, list):
                raise TypeError(f"expected a JSON array, got {type(documents).__name__}")
        except Exception:
            logger.exception("Error reading posts from %s", type(self).__name__)
            documents = self._initial_documents()
        return self._to_posts(documents)

    def _to_posts(self, documents: list) -> list[Post]:
        posts = []
        for document in documents:
            try:
                posts.append(Post.model_validate(document))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid post record in %s: %s",
                    type(self).__name__,
                    exc.errors(include_url=False),
                )
        return posts

    async def save(self, posts: list[Post]) -> None:
        """Persist the full post list, replacing what was stored."""
        documents = [p.model_dump(mode="json") for p in posts]
        try:
            await self._write(documents)
        except Exception:
            logger.exception("Error writing posts to %s", type(self).__name__)
