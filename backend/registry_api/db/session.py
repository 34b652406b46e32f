from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from registry_api.core.config import settings
import logging

# Initialize logger for this module
logger = logging.getLogger(__name__)


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database if missing."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or _is_memory_sqlite(database_url):
        return
    parent = Path(url.database).expanduser().resolve().parent
    if not parent.exists():
        logger.info(f"Creating database directory {parent}")
        parent.mkdir(parents=True, exist_ok=True)


def configure_sqlite_pragmas(async_engine: AsyncEngine, use_wal: bool) -> None:
    """
    Apply per-connection SQLite pragmas.

    busy_timeout makes concurrent readers wait instead of failing immediately
    with SQLITE_BUSY. WAL mode lets reads proceed while a write is in flight;
    it is skipped for in-memory databases, which do not support it.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA busy_timeout = 5000")
            if use_wal:
                cursor.execute("PRAGMA journal_mode = WAL")
        finally:
            cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine for a database URL, with SQLite-specific setup."""
    # Dictionary to hold database connection arguments
    connect_args = {}
    is_sqlite = "sqlite" in database_url

    if is_sqlite:
        # FastAPI handles requests across tasks, aiosqlite manages the connection thread safely
        connect_args = {"check_same_thread": False}
        _ensure_sqlite_directory(database_url)

    async_engine = create_async_engine(
        database_url,
        echo=False,
        connect_args=connect_args,
    )

    if is_sqlite:
        configure_sqlite_pragmas(async_engine, use_wal=not _is_memory_sqlite(database_url))

    return async_engine


# Create the async SQLAlchemy engine for the configured DATABASE_URL
engine = build_engine(settings.DATABASE_URL)

# Create a customized AsyncSession class (Session Factory)
# This will be used to generate new sessions for each request
AsyncSessionLocal = async_sessionmaker(
    bind=engine,              # Bind to our async engine
    class_=AsyncSession,      # Specify usage of AsyncSession
    expire_on_commit=False,   # Prevent objects from expiring after commit (kept in memory)
    autoflush=False,          # Disable autoflush for better manual control
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for FastAPI to provide a database session.
    Yields an AsyncSession and ensures it's closed after the request is processed.
    """
    async with AsyncSessionLocal() as session:
        try:
            # Yield the session to the path operation function
            yield session
        finally:
            # Ensure the session is closed, returning the connection to the pool
            await session.close()
