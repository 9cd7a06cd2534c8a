import telebot
from flask import Flask, request, abort

from botstate.config import settings
from botstate.logging import logger


def create_app(bot: telebot.TeleBot | None) -> Flask:
    """Flask-приложение, которое принимает апдейты Telegram и отдаёт их боту."""
    app = Flask(__name__)

    @app.route(f"/{settings.webhook_path}", methods=["POST"])
    def webhook() -> tuple[str, int]:
        if bot is None:
            logger.error("Bot instance not set")
            abort(500)

        # Проверка secret token (если задан)
        if settings.webhook_secret_token:
            token = request.headers.get("X-Telegram-Bot-Api-Secret-Token", "")
            if token != settings.webhook_secret_token:
                logger.warning("Invalid secret token in webhook request")
                abort(403)

        if request.headers.get("content-type") != "application/json":
            logger.warning("Invalid content-type: %s", request.headers.get("content-type"))
            abort(400)

        update = telebot.types.Update.de_json(request.get_data(as_text=True))
        bot.process_new_updates([update])
        return "OK", 200

    @app.route("/health", methods=["GET"])
    def health() -> tuple[str, int]:
        return "OK", 200

    return app
