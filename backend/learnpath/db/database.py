"""Database connection, session and transaction management.

Usage:
    from learnpath.db.database import get_db, transaction

    def my_endpoint(db: Session = Depends(get_db)):
        with transaction(db):
            ...
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from learnpath.errors import InternalError, LearnPathError, StaleWrite
from learnpath.settings import settings
from learnpath.utils import get_logger

logger = get_logger(__name__)


def _build_database_url() -> str:
    url = settings.get_database_url_auto()

    if url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+pymysql://", 1)

    return url


_database_url = _build_database_url()

_is_sqlite = _database_url.startswith("sqlite")
_engine_kwargs: dict = {
    "echo": settings.debug and settings.is_local_dev(),
}

if _is_sqlite:
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in _database_url:
        # One shared connection, otherwise every session sees an empty database
        _engine_kwargs["poolclass"] = StaticPool
    logger.info(f"Using SQLite database: {_database_url}")
else:
    _engine_kwargs.update(
        {
            "pool_size": settings.mysql_pool_size,
            "max_overflow": settings.mysql_max_overflow,
            "pool_pre_ping": settings.mysql_pool_pre_ping,
            "pool_recycle": 3600,
        }
    )
    logger.info(f"Using MySQL database: {_database_url.split('@')[1] if '@' in _database_url else 'unknown'}")

engine: Engine = create_engine(_database_url, **_engine_kwargs)


if not _is_sqlite:

    @event.listens_for(engine, "connect")
    def set_connection_timeout(dbapi_connection, connection_record):
        """Set connection timeout for MySQL."""
        cursor = dbapi_connection.cursor()
        cursor.execute("SET SESSION wait_timeout = 28800")
        cursor.close()


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Get database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """Unit of work boundary for a service mutation.

    Commits when the block completes. Any failure rolls back everything
    written inside the block, so a multi-row mutation such as a cascading
    delete is never partially committed.

    Raises:
        StaleWrite: A versioned row changed since it was read
        InternalError: Any other persistence failure
    """
    try:
        yield db
        db.commit()
    except LearnPathError:
        db.rollback()
        raise
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Stale write rolled back: {e}")
        raise StaleWrite() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {e}")
        raise InternalError("Database operation failed") from e
    except Exception:
        db.rollback()
        raise


def check_connection() -> bool:
    """Check if database connection is working."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def init_db() -> None:
    """Create tables if they do not exist."""
    from learnpath.db.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")


def close_db() -> None:
    """Close database connections."""
    engine.dispose()
    logger.info("Database connections closed")
