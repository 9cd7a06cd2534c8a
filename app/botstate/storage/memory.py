"""
Хранилище данных пользователей в памяти процесса.
Годится для тестов и однопроцессного запуска; после рестарта всё теряется.
"""
from dataclasses import dataclass, field
from typing import Mapping


@dataclass
class UserRecord:
    current_state: str = ""
    state_with_callback: str = ""
    data: dict[str, str] = field(default_factory=dict)


class InMemoryUserDataStore:
    def __init__(self) -> None:
        # user_id -> запись
        self._records: dict[str, UserRecord] = {}

    def _record(self, user_id: str) -> UserRecord:
        return self._records.setdefault(user_id, UserRecord())

    def get_current_state(self, user_id: str) -> str:
        record = self._records.get(user_id)
        return record.current_state if record else ""

    def set_current_state(self, user_id: str, name: str) -> None:
        self._record(user_id).current_state = name

    def get_state_with_callback(self, user_id: str) -> str:
        record = self._records.get(user_id)
        return record.state_with_callback if record else ""

    def set_state_with_callback(self, user_id: str, name: str) -> None:
        self._record(user_id).state_with_callback = name

    def set_data(self, user_id: str, values: Mapping[str, str]) -> None:
        self._record(user_id).data.update(values)

    def get_field(self, user_id: str, key: str) -> str:
        record = self._records.get(user_id)
        if record is None:
            return ""
        return record.data.get(key, "")

    def get_data(self, user_id: str) -> dict[str, str]:
        record = self._records.get(user_id)
        return dict(record.data) if record else {}

    def reset(self, user_id: str) -> None:
        self._records.pop(user_id, None)
