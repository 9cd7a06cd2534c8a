import logging
import sys

from botstate.config import settings


def setup_logging() -> logging.Logger:
    """Логгер движка; telebot пишет в свой логгер, приглушаем его до WARNING."""
    level = logging.getLevelName(settings.log_level.upper())
    logger = logging.getLogger("botstate")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    if isinstance(level, int):
        logging.getLogger("TeleBot").setLevel(max(level, logging.WARNING))

    return logger


logger = setup_logging()
