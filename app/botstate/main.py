import time

import sqlalchemy
import telebot
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from flask import Flask

from botstate.bot.dialogue import build_dialogue
from botstate.bot.engine import StateEngine
from botstate.bot.handlers import register_handlers
from botstate.bot.webhook_server import create_app
from botstate.config import settings
from botstate.logging import logger
from botstate.storage.base import UserDataStore
from botstate.storage.db import get_engine
from botstate.storage.factory import create_store


def create_bot(engine: StateEngine, store: UserDataStore) -> telebot.TeleBot:
    """Создать бота и подключить к нему машину состояний."""
    if not settings.bot_token:
        raise ValueError("BOT_TOKEN is required to run the Telegram bot")
    bot = telebot.TeleBot(settings.bot_token, threaded=False)
    register_handlers(bot, engine, store)
    return bot


def setup_webhook(bot: telebot.TeleBot) -> None:
    """Установить webhook в Telegram."""
    logger.info("Removing old webhook...")
    bot.delete_webhook(drop_pending_updates=True)
    time.sleep(0.5)

    logger.info("Setting webhook: %s", settings.webhook_url)
    bot.set_webhook(
        url=settings.webhook_url,
        secret_token=settings.webhook_secret_token or None,
    )
    logger.info("Webhook set successfully")


def run_migrations() -> None:
    """Применить pending-миграции Alembic (только для postgres-хранилища)."""
    if settings.storage_backend != "postgres":
        return

    logger.info("Running database migrations...")
    alembic_cfg = Config("alembic.ini")

    with get_engine().connect() as conn:
        context = MigrationContext.configure(conn)
        current_rev = context.get_current_revision()
        has_tables = sqlalchemy.inspect(conn).has_table("user_states")

    # Таблицы созданы через create_all, а alembic_version нет — штампуем
    if current_rev is None and has_tables:
        logger.info("Existing database without alembic_version detected, stamping 001_initial...")
        command.stamp(alembic_cfg, "001_initial")

    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations applied")


def build_application() -> Flask:
    """Собрать хранилище, движок, бота и Flask-приложение."""
    run_migrations()

    store = create_store()
    engine = StateEngine(build_dialogue(), store)
    bot = create_bot(engine, store)
    setup_webhook(bot)
    return create_app(bot)


def main() -> None:
    logger.info("Starting botstate demo bot...")
    app = build_application()

    logger.info("Starting webhook server on %s:%d", settings.app_host, settings.app_port)
    app.run(host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    main()
