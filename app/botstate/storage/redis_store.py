from typing import Mapping

import redis

from botstate.config import settings
from botstate.errors import StoreError
from botstate.logging import logger

_redis_client: redis.Redis | None = None

_CURRENT_STATE = "current_state"
_STATE_WITH_CALLBACK = "state_with_callback"


def get_redis() -> redis.Redis:
    """Получить (или создать) клиент Redis."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_dsn, decode_responses=True)
    return _redis_client


class RedisUserDataStore:
    """
    Данные пользователя в двух hash-ключах Redis:

      <prefix>:<user_id>       — current_state, state_with_callback
      <prefix>:<user_id>:data  — произвольные поля

    Поля разнесены, чтобы ключ данных "current_state" не затирал состояние.
    Если задан ttl, оба ключа продлеваются при каждой записи.
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        prefix: str | None = None,
        ttl_seconds: int | None = None,
    ):
        self._client = client
        self._prefix = prefix if prefix is not None else settings.redis_key_prefix
        self._ttl = settings.user_data_ttl_seconds if ttl_seconds is None else ttl_seconds

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = get_redis()
        return self._client

    def _state_key(self, user_id: str) -> str:
        return f"{self._prefix}:{user_id}"

    def _data_key(self, user_id: str) -> str:
        return f"{self._prefix}:{user_id}:data"

    def _get(self, key: str, field: str, user_id: str, operation: str) -> str:
        try:
            value = self.client.hget(key, field)
        except redis.RedisError as e:
            logger.error("Redis error on %s for user %s: %s", operation, user_id, e)
            raise StoreError(operation, user_id, str(e)) from e
        return value or ""

    def _set(self, key: str, values: Mapping[str, str], user_id: str, operation: str) -> None:
        try:
            # запись и продление TTL одной транзакцией
            with self.client.pipeline(transaction=True) as pipe:
                pipe.hset(key, mapping=dict(values))
                if self._ttl > 0:
                    pipe.expire(key, self._ttl)
                pipe.execute()
        except redis.RedisError as e:
            logger.error("Redis error on %s for user %s: %s", operation, user_id, e)
            raise StoreError(operation, user_id, str(e)) from e

    def get_current_state(self, user_id: str) -> str:
        return self._get(self._state_key(user_id), _CURRENT_STATE, user_id, "get current state")

    def set_current_state(self, user_id: str, name: str) -> None:
        self._set(self._state_key(user_id), {_CURRENT_STATE: name}, user_id, "set current state")

    def get_state_with_callback(self, user_id: str) -> str:
        return self._get(
            self._state_key(user_id), _STATE_WITH_CALLBACK, user_id, "get state with callback"
        )

    def set_state_with_callback(self, user_id: str, name: str) -> None:
        self._set(
            self._state_key(user_id), {_STATE_WITH_CALLBACK: name}, user_id, "set state with callback"
        )

    def set_data(self, user_id: str, values: Mapping[str, str]) -> None:
        if not values:
            return
        self._set(self._data_key(user_id), values, user_id, "set data")

    def get_field(self, user_id: str, key: str) -> str:
        return self._get(self._data_key(user_id), key, user_id, "get field")

    def get_data(self, user_id: str) -> dict[str, str]:
        try:
            return dict(self.client.hgetall(self._data_key(user_id)))
        except redis.RedisError as e:
            logger.error("Redis error on get data for user %s: %s", user_id, e)
            raise StoreError("get data", user_id, str(e)) from e

    def reset(self, user_id: str) -> None:
        try:
            self.client.delete(self._state_key(user_id), self._data_key(user_id))
        except redis.RedisError as e:
            logger.error("Redis error on reset for user %s: %s", user_id, e)
            raise StoreError("reset", user_id, str(e)) from e
        logger.info("User data reset for user %s", user_id)
