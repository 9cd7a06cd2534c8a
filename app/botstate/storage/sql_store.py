from contextlib import contextmanager
from typing import Callable, Iterator, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from botstate.errors import StoreError
from botstate.logging import logger
from botstate.storage.db import get_session
from botstate.storage.repo import Repository


class SqlUserDataStore:
    """Хранилище данных пользователей в БД (таблицы user_states, user_fields)."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    @contextmanager
    def _repository(self, operation: str, user_id: str) -> Iterator[Repository]:
        session = None
        try:
            session = self._session_factory()
            yield Repository(session)
        except SQLAlchemyError as e:
            logger.error("DB error on %s for user %s: %s", operation, user_id, e)
            if session is not None:
                session.rollback()
            raise StoreError(operation, user_id, str(e)) from e
        finally:
            if session is not None:
                session.close()

    def get_current_state(self, user_id: str) -> str:
        with self._repository("get current state", user_id) as repo:
            user_state = repo.get_user_state(user_id)
            return user_state.current_state if user_state else ""

    def set_current_state(self, user_id: str, name: str) -> None:
        with self._repository("set current state", user_id) as repo:
            repo.upsert_user_state(user_id, current_state=name)

    def get_state_with_callback(self, user_id: str) -> str:
        with self._repository("get state with callback", user_id) as repo:
            user_state = repo.get_user_state(user_id)
            return user_state.state_with_callback if user_state else ""

    def set_state_with_callback(self, user_id: str, name: str) -> None:
        with self._repository("set state with callback", user_id) as repo:
            repo.upsert_user_state(user_id, state_with_callback=name)

    def set_data(self, user_id: str, values: Mapping[str, str]) -> None:
        if not values:
            return
        with self._repository("set data", user_id) as repo:
            repo.set_fields(user_id, values)

    def get_field(self, user_id: str, key: str) -> str:
        with self._repository("get field", user_id) as repo:
            return repo.get_field(user_id, key)

    def get_data(self, user_id: str) -> dict[str, str]:
        with self._repository("get data", user_id) as repo:
            return repo.get_fields(user_id)

    def reset(self, user_id: str) -> None:
        with self._repository("reset", user_id) as repo:
            found = repo.delete_user(user_id)
        logger.info("User data reset for user %s (found=%s)", user_id, found)
