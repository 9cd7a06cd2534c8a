from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator

from botstate.bot.buffer import MessageBuffer
from botstate.bot.states import State
from botstate.errors import (
    BotStateError,
    MissingAction,
    NoActiveUser,
    StoreError,
    UnknownState,
)
from botstate.logging import logger
from botstate.storage.base import UserDataStore


@dataclass(frozen=True)
class Context:
    """То, что получают action и callback: пользователь, хранилище и движок."""
    user_id: str
    store: UserDataStore
    engine: "StateEngine"

    @property
    def messages(self) -> MessageBuffer:
        return MessageBuffer(self.store, self.user_id)

    def get(self, key: str) -> str:
        return self.store.get_field(self.user_id, key)

    def set_data(self, **values: str) -> None:
        self.store.set_data(self.user_id, values)

    def resolve(self, state_name: str) -> bool:
        """Выполнить другое состояние для этого же пользователя."""
        return self.engine.resolve(self.user_id, state_name)


@contextmanager
def _persisting(operation: str, user_id: str) -> Iterator[None]:
    """Любой сбой хранилища превращается в StoreError."""
    try:
        yield
    except BotStateError:
        raise
    except Exception as e:
        logger.error("Store error on %s for user %s: %s", operation, user_id, e)
        raise StoreError(operation, user_id, str(e)) from e


class StateEngine:
    """
    Линейная машина состояний диалога.

    Ожидающий callback хранится в данных пользователя как имя состояния
    (state_with_callback) и при каждом вызове ищется заново в таблице
    состояний, поэтому переживает рестарт процесса между репликами.
    """

    def __init__(self, states: Iterable[State], store: UserDataStore):
        self.states: tuple[State, ...] = tuple(states)
        self.store = store
        self._by_name: dict[str, State] = {}
        for state in self.states:
            if state.name in self._by_name:
                raise ValueError(f"Duplicate state name: {state.name}")
            self._by_name[state.name] = state

    def get_state(self, name: str) -> State | None:
        return self._by_name.get(name)

    def context(self, user_id: str) -> Context:
        return Context(user_id=user_id, store=self.store, engine=self)

    def resolve(self, user_id: str | None, state_name: str) -> bool:
        """
        Выполнить состояние state_name для пользователя user_id.

        Порядок:
          1. Найти состояние (UnknownState), проверить пользователя
             (NoActiveUser) и наличие action (MissingAction).
          2. Записать state_name как current_state.
          3. Если есть ожидающий callback — выполнить его. False останавливает
             вызов: action запрошенного состояния не запускается.
          4. Если у состояния есть свой callback — взвести его на следующий вызов.
          5. Выполнить action; при успехе перейти в next.

        Возвращает результат action (или False, если не прошёл callback).
        """
        state = self.get_state(state_name)
        if state is None:
            raise UnknownState(state_name)

        if not user_id:
            raise NoActiveUser(state_name)

        if state.action is None:
            raise MissingAction(state_name)

        logger.info("Resolving state %s for user %s", state.name, user_id)

        with _persisting("set current state", user_id):
            self.store.set_current_state(user_id, state.name)

        ctx = self.context(user_id)

        if not self._run_pending_callback(ctx):
            logger.info("Pending callback rejected input of user %s, state %s skipped", user_id, state.name)
            return False

        if state.callback is not None:
            with _persisting("set state with callback", user_id):
                self.store.set_state_with_callback(user_id, state.name)
            logger.debug("Callback of state %s armed for user %s", state.name, user_id)

        result = bool(state.action(ctx))

        if result and state.next:
            with _persisting("set current state", user_id):
                self.store.set_current_state(user_id, state.next)
            logger.debug("User %s moved from %s to %s", user_id, state.name, state.next)

        return result

    def _run_pending_callback(self, ctx: Context) -> bool:
        """Выполнить callback, взведённый предыдущим состоянием. Нет callback — успех."""
        with _persisting("get state with callback", ctx.user_id):
            pending_name = self.store.get_state_with_callback(ctx.user_id)

        if not pending_name:
            return True

        pending = self.get_state(pending_name)
        if pending is None or pending.callback is None:
            logger.debug("No callback to run for pending state %s", pending_name)
            return True

        passed = bool(pending.callback(ctx))
        logger.debug("Callback of state %s for user %s returned %s", pending_name, ctx.user_id, passed)
        return passed
