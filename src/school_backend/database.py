import logging
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

from school_backend.settings import settings

logger = logging.getLogger(__name__)

_database_options = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 5,
    "pool_timeout": 30,
    "pool_recycle": 300
}

def _engine_options(url: str) -> dict:
    # sqlite uses a SingletonThreadPool/StaticPool which rejects sizing options
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return _database_options

_engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
_SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

def get_engine():
    return _engine

def get_db() -> Generator[Session, None, None]:

    db = _SessionLocal()

    try:
        yield db
    except OperationalError:
        logger.error("Database connection failed")
        db.rollback()
        raise
    finally:
        db.close()

@contextmanager
def transaction(db: Session):
    """Run a block of writes as one unit: commit on success, rollback on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        logger.error("Transaction rolled back", exc_info=True)
        db.rollback()
        raise
