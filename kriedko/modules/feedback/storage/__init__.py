# kriedko/modules/feedback/storage/__init__.py

"""
Submission persistence backends.

The backend is picked once at startup from ``Settings.storage_backend``;
everything else depends only on ``SubmissionStore``.
"""

import logging

from kriedko.core.config import Settings, StoreBackend
from kriedko.modules.feedback.storage.base import SubmissionStore, sort_newest_first
from kriedko.modules.feedback.storage.cached_store import CachedSubmissionStore
from kriedko.modules.feedback.storage.file_store import FileSubmissionStore
from kriedko.modules.feedback.storage.memory_store import InMemorySubmissionStore

logger = logging.getLogger(__name__)

__all__ = [
    "SubmissionStore",
    "CachedSubmissionStore",
    "FileSubmissionStore",
    "InMemorySubmissionStore",
    "create_store",
    "sort_newest_first",
]


def create_store(settings: Settings) -> SubmissionStore:
    """Build the configured store; remote backends get the read-through cache."""
    backend = settings.storage_backend

    if backend == StoreBackend.FILE:
        store: SubmissionStore = FileSubmissionStore(settings.data_file)
    elif backend == StoreBackend.MEMORY:
        store = InMemorySubmissionStore()
    elif backend == StoreBackend.KV:
        from kriedko.core.redis_config import create_redis_client
        from kriedko.modules.feedback.storage.kv_store import RedisSubmissionStore

        if not settings.redis_url:
            raise ValueError("REDIS_URL must be set for the kv storage backend")
        store = CachedSubmissionStore(
            RedisSubmissionStore(
                create_redis_client(settings.redis_url),
                prefix=settings.redis_key_prefix,
            )
        )
    elif backend == StoreBackend.SQL:
        from kriedko.core.database import build_engine
        from kriedko.modules.feedback.storage.sql_store import SqlSubmissionStore

        store = CachedSubmissionStore(SqlSubmissionStore(build_engine(settings.database_url)))
    else:
        raise ValueError(f"Unsupported storage backend: {backend}")

    logger.info(f"Using {store.backend_name} submission store")
    return store
