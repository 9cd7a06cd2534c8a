"""
Общие фикстуры тестов botstate.

- RecordingStore — хранилище в памяти, которое запоминает все записи
- make_engine     — движок поверх этого хранилища
- calls           — журнал вызовов action/callback
"""
from typing import Callable, Iterable

import pytest

from botstate.bot.engine import Context, StateEngine
from botstate.bot.states import State
from botstate.storage.memory import InMemoryUserDataStore

USER_ID = "42"


class RecordingStore(InMemoryUserDataStore):
    """Хранилище в памяти, которое пишет журнал операций записи."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[tuple[str, str, object]] = []

    def set_current_state(self, user_id: str, name: str) -> None:
        self.writes.append(("current_state", user_id, name))
        super().set_current_state(user_id, name)

    def set_state_with_callback(self, user_id: str, name: str) -> None:
        self.writes.append(("state_with_callback", user_id, name))
        super().set_state_with_callback(user_id, name)

    def set_data(self, user_id, values) -> None:
        self.writes.append(("data", user_id, dict(values)))
        super().set_data(user_id, values)


class CallLog:
    """Журнал вызовов handler-ов состояний."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def handler(self, label: str, result: bool = True) -> Callable[[Context], bool]:
        def _handler(ctx: Context) -> bool:
            self.calls.append((label, ctx.user_id))
            return result
        return _handler

    def labels(self) -> list[str]:
        return [label for label, _ in self.calls]


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def calls() -> CallLog:
    return CallLog()


@pytest.fixture
def make_engine(store: RecordingStore) -> Callable[[Iterable[State]], StateEngine]:
    def _make(states: Iterable[State]) -> StateEngine:
        return StateEngine(states, store)
    return _make
