from contextlib import contextmanager
from typing import Generator
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from string_analyzer.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()

# ------------------------------------------------------------------------------
# DATABASE ENGINE
# ------------------------------------------------------------------------------
SQLITE_BUSY_TIMEOUT_MS = 5000


def _configure_sqlite(dbapi_connection, connection_record):
    """WAL gives concurrent readers alongside a single writer"""
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """Create the engine, translating a missing driver into StorageUnavailableError"""
    is_sqlite = database_url.startswith("sqlite")
    try:
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            pool_pre_ping=True,
        )
    except (ImportError, SQLAlchemyError) as e:
        logger.error(f"❌ Failed to create SQLAlchemy engine: {e}")
        raise StorageUnavailableError(f"Database engine unavailable: {e}") from e

    if is_sqlite:
        event.listen(engine, "connect", _configure_sqlite)
    return engine


# ------------------------------------------------------------------------------
# SESSIONS
# ------------------------------------------------------------------------------
def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Provide a session that is always closed afterwards"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


# ------------------------------------------------------------------------------
# INITIALIZATION
# ------------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create tables (runs once on startup)"""
    from string_analyzer.models import string_entry  # noqa: F401 ensure models are registered
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables ready.")
    except SQLAlchemyError as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise StorageUnavailableError(f"Database initialization failed: {e}") from e
