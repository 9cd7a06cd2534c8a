"""
Описание состояний диалога.

Состояние — это имя, обязательный action, необязательный callback и
необязательный указатель next. Набор состояний задаётся один раз при
создании движка и дальше не меняется.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from botstate.bot.engine import Context

# Сигнатура и action, и callback: получить контекст, вернуть успех
StateHandler = Callable[["Context"], bool]


@dataclass(frozen=True)
class State:
    # Уникальное имя, регистр важен
    name: str
    # Основная логика состояния (например, отправить вопрос)
    action: StateHandler | None = None
    # Проверка ответа пользователя при следующем вызове
    callback: StateHandler | None = None
    # Куда перейти после успешного action ("" — остаться)
    next: str = ""
