import telebot

from botstate.bot.buffer import MessageBuffer
from botstate.bot.dialogue import INPUT_FIELD
from botstate.bot.engine import StateEngine
from botstate.bot.messages import UNKNOWN
from botstate.config import settings
from botstate.errors import BotStateError
from botstate.logging import logger
from botstate.storage.base import UserDataStore


def _extract_command(text: str) -> str:
    tokens = text.strip().split(maxsplit=1)
    if not tokens:
        return ""
    command_token = tokens[0].lower()
    if not command_token.startswith("/"):
        return ""
    if "@" in command_token:
        command_token = command_token.split("@", 1)[0]
    return command_token


def handle_text(engine: StateEngine, store: UserDataStore, user_id: str, text: str) -> list[str]:
    """
    Прогнать одно сообщение пользователя через движок.

    /start сбрасывает данные пользователя и запускает начальное состояние,
    любой другой текст продолжает текущее. Возвращает накопленные ответы бота.
    """
    try:
        if _extract_command(text) == "/start":
            store.reset(user_id)
            state_name = settings.initial_state
        else:
            state_name = store.get_current_state(user_id) or settings.initial_state

        store.set_data(user_id, {INPUT_FIELD: text})
        engine.resolve(user_id, state_name)
    except BotStateError as e:
        logger.error("Failed to resolve state for user %s: %s", user_id, e)

    try:
        return MessageBuffer(store, user_id).drain()
    except BotStateError as e:
        logger.error("Failed to drain messages for user %s: %s", user_id, e)
        return []


def register_handlers(bot: telebot.TeleBot, engine: StateEngine, store: UserDataStore) -> None:
    """Регистрирует хендлер бота."""

    @bot.message_handler(func=lambda m: m.chat.type == "private", content_types=["text"])
    def handle_message(message: telebot.types.Message) -> None:
        """Любой текст в ЛС идёт в машину состояний."""
        user = message.from_user
        logger.info("Message from user %d (%s)", user.id, user.username)

        replies = handle_text(engine, store, str(user.id), message.text or "") or [UNKNOWN]

        for reply in replies:
            try:
                bot.send_message(message.chat.id, reply)
            except Exception as e:
                logger.error("Failed to send reply to chat %d: %s", message.chat.id, e)
