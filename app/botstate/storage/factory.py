from botstate.config import settings
from botstate.logging import logger
from botstate.storage.base import UserDataStore


def create_store(backend: str | None = None) -> UserDataStore:
    """Создать хранилище, выбранное в STORAGE_BACKEND."""
    backend = backend or settings.storage_backend
    logger.info("Using %s user data store", backend)

    if backend == "memory":
        from botstate.storage.memory import InMemoryUserDataStore
        return InMemoryUserDataStore()
    if backend == "redis":
        from botstate.storage.redis_store import RedisUserDataStore
        return RedisUserDataStore()
    if backend == "postgres":
        from botstate.storage.sql_store import SqlUserDataStore
        return SqlUserDataStore()

    raise ValueError(f"Unknown storage backend: {backend}")
