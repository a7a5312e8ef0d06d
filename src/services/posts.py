"""
Post CRUD service.

``PostService`` wraps a :class:`BasePostStore` and implements list / get /
create / update / delete as whole-list read-modify-write operations.
There is no locking: two concurrent creates can read the same list and
assign the same id.
"""

import logging

from src.core.exceptions import PostNotFoundError
from src.core.models import Post, PostCreate, PostUpdate
from src.core.utils import today
from src.services.storage import BasePostStore, create_store

logger = logging.getLogger(__name__)


def _next_id(posts: list[Post]) -> int:
    return max((p.id for p in posts), default=0) + 1


class PostService:
    """Business operations over the post list.

    Args:
        store: Backend that persists the full list.
    """

    def __init__(self, store: BasePostStore) -> None:
        self._store = store

    @property
    def store(self) -> BasePostStore:
        return self._store

    async def list_posts(self) -> list[Post]:
        """Return every post, most recent first."""
        return await self._store.load()

    async def get_post(self, post_id: int) -> Post:
        """Return a post by ID or raise :class:`PostNotFoundError`."""
        for post in await self._store.load():
            if post.id == post_id:
                return post
        raise PostNotFoundError(post_id)

    async def create_post(self, draft: PostCreate) -> Post:
        """Assign the next id and today's date, prepend, and persist."""
        posts = await self._store.load()
        post = Post(id=_next_id(posts), date=today(), **draft.model_dump())
        posts.insert(0, post)
        await self._store.save(posts)
        logger.info("Created post id=%s type=%s", post.id, post.type)
        return post

    async def update_post(self, post_id: int, changes: PostUpdate) -> Post:
        """Merge the fields set in *changes* into the stored post.

        ``id`` and ``date`` never change.
        """
        posts = await self._store.load()
        for index, post in enumerate(posts):
            if post.id == post_id:
                fields = changes.model_dump(exclude_unset=True, exclude_none=True)
                updated = post.model_copy(update=fields)
                posts[index] = updated
                await self._store.save(posts)
                return updated
        raise PostNotFoundError(post_id)

    async def delete_post(self, post_id: int) -> None:
        """Remove a post by ID or raise :class:`PostNotFoundError`."""
        posts = await self._store.load()
        remaining = [p for p in posts if p.id != post_id]
        if len(remaining) == len(posts):
            raise PostNotFoundError(post_id)
        await self._store.save(remaining)
        logger.info("Deleted post id=%s", post_id)


# Module-level singleton (tests swap it via ``app.dependency_overrides``).
_service: PostService | None = None


def get_post_service() -> PostService:
    """Return the process-wide PostService bound to the configured store."""
    global _service
    if _service is None:
        _service = PostService(create_store())
    return _service


async def close_post_service() -> None:
    """Close the store connection and drop the singleton."""
    global _service
    if _service is not None:
        await _service.store.close()
    _service = None

