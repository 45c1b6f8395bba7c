"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets its own
session from get_db() and the route decides when to commit.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from smb_ledger.config import get_settings

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before handing them out,
# so a restarted database does not fail the next posting.
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def enable_sqlite_savepoints(sqlite_engine) -> None:
    """
    Let SQLAlchemy own BEGIN on pysqlite connections.

    The pysqlite driver starts transactions lazily and its
    SAVEPOINT handling breaks nested transactions, which the
    ledger relies on to post a journal all-or-nothing.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

# --- Session Factory ---
# autocommit=False: the caller controls the transaction boundary,
# which is what makes a journal header and its lines all-or-nothing.
# autoflush=False: SQL is only sent on an explicit flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed when the
    request finishes, even if the route raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
