from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, Session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

db_engine = None
SessionLocal = None


def create_store(config: Optional[Dict[str, Any]] = None):
    """Build the engine and session factory backing every inventory operation.

    Values come from the environment (``DATABASE_URL``, ``AGRITRACK_SQL_ECHO``)
    and may be overridden by ``config``. Returns the engine.
    """
    global db_engine, SessionLocal
    settings = {
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///agritrack.db'),
        'SQL_ECHO': os.getenv('AGRITRACK_SQL_ECHO', '0') in ('1', 'true', 'True'),
    }
    if config:
        # allow tests or callers to override default config values
        settings.update(config)

    db_url = settings['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=settings['SQL_ECHO'],
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=settings['SQL_ECHO'], future=True)

    if db_engine.dialect.name == 'sqlite':
        # LIKE is case-insensitive in SQLite unless told otherwise
        @event.listens_for(db_engine, 'connect')
        def _sqlite_case_sensitive_like(dbapi_conn, _record):  # type: ignore
            cursor = dbapi_conn.cursor()
            cursor.execute('PRAGMA case_sensitive_like = ON')
            cursor.close()

    SessionLocal = sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False)
    logger.debug('Store ready on %s', db_engine.url.render_as_string(hide_password=True))
    return db_engine


def init_schema():
    """Create the inventory table on the current engine if it is missing."""
    from .models.base import Base
    from .models import inventory_record  # noqa: F401
    if db_engine is None:
        create_store()
    Base.metadata.create_all(db_engine)


def get_db() -> Session:
    """Open a new session; every gateway operation owns and closes its own."""
    if SessionLocal is None:
        create_store()
    return SessionLocal()
