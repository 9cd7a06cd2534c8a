"""
Контракт хранилища данных пользователя.

На каждого пользователя хранится:
  - current_state        — имя текущего состояния
  - state_with_callback  — имя состояния, чей callback ждёт ответа ("" — никто)
  - data                 — произвольные строковые поля (str -> str)

Любой сбой хранилища поднимается как StoreError.
"""
from typing import Mapping, Protocol


class UserDataStore(Protocol):
    def get_current_state(self, user_id: str) -> str: ...

    def set_current_state(self, user_id: str, name: str) -> None: ...

    def get_state_with_callback(self, user_id: str) -> str: ...

    def set_state_with_callback(self, user_id: str, name: str) -> None: ...

    def set_data(self, user_id: str, values: Mapping[str, str]) -> None: ...

    def get_field(self, user_id: str, key: str) -> str: ...

    def get_data(self, user_id: str) -> dict[str, str]: ...

    def reset(self, user_id: str) -> None: ...
