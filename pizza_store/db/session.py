from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.orm import sessionmaker, declarative_base
from pizza_store.core.config import settings
import logging
import sqlite3
import threading
import contextvars

DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy connect_args differ between SQLite and other DBs (e.g. MySQL)
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

# pool_pre_ping checks pooled connections before use so a dropped server
# connection surfaces as a fresh connect instead of a mid-transaction error.
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    pool_recycle=settings.DB_POOL_RECYCLE,
    poolclass=QueuePool,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

_pool_logger = logging.getLogger("app.db.pool")
_pool_logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
_connect_count = 0
_pool_lock = threading.Lock()


class QueryCounter:
    """Mutable per-request counter.

    Sync handlers run in a copied context inside the threadpool, so the
    middleware hands out an object and listeners increment it in place.
    """

    def __init__(self):
        self.value = 0


request_db_query_count = contextvars.ContextVar("request_db_query_count", default=None)
_global_db_query_count = 0


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign keys off; the order graph relies on them.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(engine, "connect")
def _on_connect(dbapi_connection, connection_record):
    global _connect_count
    with _pool_lock:
        _connect_count += 1
        cnt = _connect_count
    if cnt % settings.DB_LOG_EVERY_N == 0:
        _pool_logger.info(f"SQLAlchemy Pool CONNECT events: total opened={cnt}")


@event.listens_for(engine, "before_cursor_execute")
def _on_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    counter = request_db_query_count.get()
    if counter is not None:
        counter.value += 1
    global _global_db_query_count
    with _pool_lock:
        _global_db_query_count += 1


def get_global_db_queries_total() -> int:
    """Return the total number of DB roundtrips since process start."""
    return int(_global_db_query_count)


def get_db():
    """FastAPI dependency that provides a scoped SQLAlchemy Session.

    The session is closed on every exit path, which returns its connection to
    the pool and discards any transaction the handler left open.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_db(bind=None):
    """Create all tables and, when enabled, seed the catalog."""
    # Import models here so they are registered on the metadata
    import pizza_store.models.address  # noqa: F401
    import pizza_store.models.catalog  # noqa: F401
    import pizza_store.models.order  # noqa: F401
    import pizza_store.models.pizza  # noqa: F401
    from pizza_store.db.seed import seed_catalog

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    if settings.SEED_CATALOG:
        Session = sessionmaker(autocommit=False, autoflush=False, bind=bind)
        db = Session()
        try:
            seed_catalog(db)
        finally:
            db.close()
