"""WSGI entrypoint для gunicorn: gunicorn botstate.wsgi:application"""
from botstate.main import build_application
from botstate.logging import logger

logger.info("WSGI: Initializing application...")

application = build_application()

logger.info("WSGI: Application ready")
