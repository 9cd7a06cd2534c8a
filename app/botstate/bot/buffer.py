import json
from typing import Sequence

from botstate.config import settings
from botstate.errors import EmptyInput
from botstate.logging import logger
from botstate.storage.base import UserDataStore


class MessageBuffer:
    """
    Очередь исходящих сообщений бота в данных пользователя.

    Состояния складывают сюда ответы через append(), транспорт после
    выполнения забирает их через drain(). Хранится как JSON-массив строк.
    """

    def __init__(self, store: UserDataStore, user_id: str, field: str | None = None):
        self._store = store
        self._user_id = user_id
        self._field = field or settings.messages_field

    def append(self, messages: Sequence[str] | str) -> None:
        """Добавить сообщения в конец очереди."""
        if isinstance(messages, str):
            messages = [messages]
        if len(messages) == 0:
            raise EmptyInput()
        # не-строка в JSON сделает весь буфер нечитаемым при следующем _load
        if not all(isinstance(m, str) for m in messages):
            raise TypeError("Buffered messages must be strings")

        buffered = self._load() + list(messages)
        encoded = json.dumps(buffered, ensure_ascii=False, separators=(",", ":"))
        self._store.set_data(self._user_id, {self._field: encoded})

    def drain(self) -> list[str]:
        """
        Забрать все сообщения и очистить очередь.

        Битый или пустой буфер отдаётся как [] без ошибки, чтобы диалог
        не застревал.
        """
        messages = self._load()
        self._store.set_data(self._user_id, {self._field: ""})
        return messages

    def _load(self) -> list[str]:
        raw = self._store.get_field(self._user_id, self._field)
        if not raw:
            return []
        try:
            messages = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Invalid message buffer for user %s: %s", self._user_id, e)
            return []
        if not isinstance(messages, list) or not all(isinstance(m, str) for m in messages):
            logger.warning("Message buffer for user %s is not a list of strings", self._user_id)
            return []
        return messages
