"""
Storage module - Post persistence backends.

Factory function for creating a post store based on configuration.
"""

from src.core.config import Settings, get_settings
from src.core.exceptions import ConfigurationError
from src.services.storage.base import BasePostStore

__all__ = ["BasePostStore", "create_store"]


def create_store(settings: Settings | None = None) -> BasePostStore:
    """
    Factory function to create the configured post store.

    Args:
        settings: Optional settings override (defaults to ``get_settings()``).

    Returns:
        BasePostStore implementation instance

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    settings = settings or get_settings()
    backend = settings.resolved_storage_backend

    if backend == "file":
        from src.services.storage.file_store import FilePostStore

        return FilePostStore(settings.posts_file, seed=settings.seed_demo_posts)
    elif backend == "redis":
        from src.services.storage.redis_store import RedisPostStore

        return RedisPostStore(
            settings.redis_url,
            key=settings.redis_posts_key,
            seed=settings.seed_demo_posts,
        )
    elif backend == "database":
        from src.services.storage.sql_store import SQLPostStore

        return SQLPostStore(settings.database_url, seed=settings.seed_demo_posts)
    else:
        raise ConfigurationError(f"Unknown storage backend: {backend}")
