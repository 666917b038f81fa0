import contextlib
import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(db_url: str) -> Engine:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(
            db_url,
            pool_size=settings.DB_POOL_SIZE,  # Number of connections to keep open
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,  # Verify connections before using them from the pool
        )

    in_memory = url.database in (None, "", ":memory:")
    kwargs = {}
    if in_memory:
        kwargs["poolclass"] = StaticPool
    sqlite_engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT},
        **kwargs,
    )

    @event.listens_for(sqlite_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    return sqlite_engine


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Engine = None):
    # Table classes register on import
    import storefront.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session


@contextlib.contextmanager
def session_scope(bind: Engine = None):
    session = Session(bind or engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
