from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker, Session

from botstate.config import settings

_engine: Engine | None = None
_session_local: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """Получить (или создать) движок БД."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings.postgres_dsn, echo=False, pool_pre_ping=True)
    return _engine


def get_session() -> Session:
    """Создать новую сессию БД."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)
    return _session_local()
