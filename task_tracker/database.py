from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker import models  # noqa: F401  registers tables on SQLModel.metadata
from task_tracker.core.config import get_settings


def _install_sqlite_pragmas(engine: AsyncEngine) -> None:
    """Enforce foreign keys and make LIKE case-sensitive, as on PostgreSQL."""

    def on_connect(dbapi_conn, _conn_record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA case_sensitive_like=ON;")
        cur.close()

    event.listen(engine.sync_engine, "connect", on_connect)


def build_engine(database_url: str, echo: bool = False, pool_size: int = 5) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo, future=True)
        _install_sqlite_pragmas(engine)
        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        pool_pre_ping=True,
        pool_size=pool_size,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


settings = get_settings()

# Create async engine
engine = build_engine(settings.database_url, settings.db_echo, settings.db_pool_size)

# Create async session factory using async_sessionmaker
async_session = build_session_factory(engine)


# Dependency for getting DB session
async def get_db():
    async with async_session() as session:
        yield session


async def create_db_and_tables(bind: AsyncEngine = engine):
    """Create tables without migrations (development and tests)."""
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine(bind: AsyncEngine = engine):
    await bind.dispose()
