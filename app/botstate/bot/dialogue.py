"""
Демонстрационный диалог-анкета: имя -> возраст -> итог -> снова имя.

Каждое состояние задаёт вопрос в action, а ответ проверяет его callback
при следующем сообщении пользователя.
"""
from botstate.bot.engine import Context
from botstate.bot.messages import ASK_NAME, EMPTY_NAME, ASK_AGE, BAD_AGE, SUMMARY
from botstate.bot.states import State

# Поле, куда транспорт кладёт последний текст пользователя
INPUT_FIELD = "input"

MAX_AGE = 150


def ask_name(ctx: Context) -> bool:
    ctx.messages.append(ASK_NAME)
    return True


def save_name(ctx: Context) -> bool:
    name = ctx.get(INPUT_FIELD).strip()
    if not name or name.startswith("/"):
        ctx.messages.append(EMPTY_NAME)
        return False
    ctx.set_data(name=name)
    return True


def ask_age(ctx: Context) -> bool:
    ctx.messages.append(ASK_AGE.format(name=ctx.get("name")))
    return True


def save_age(ctx: Context) -> bool:
    raw = ctx.get(INPUT_FIELD).strip()
    if not (raw.isascii() and raw.isdigit()) or not 1 <= int(raw) <= MAX_AGE:
        ctx.messages.append(BAD_AGE)
        return False
    ctx.set_data(age=str(int(raw)))
    return True


def summarize(ctx: Context) -> bool:
    ctx.messages.append(SUMMARY.format(name=ctx.get("name"), age=ctx.get("age")))
    return True


def accept_any(ctx: Context) -> bool:
    # Перехватывает ожидание, чтобы старый save_age не срабатывал повторно
    return True


def build_dialogue() -> list[State]:
    return [
        State(name="start", action=ask_name, callback=save_name, next="age"),
        State(name="age", action=ask_age, callback=save_age, next="done"),
        State(name="done", action=summarize, callback=accept_any, next="start"),
    ]
