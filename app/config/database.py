"""Database engine and session management for the SQL record store."""

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config.settings import Settings, settings


# Define naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Create metadata with schema
metadata = MetaData(naming_convention=convention, schema=settings.database_schema)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class with schema support."""
    metadata = metadata


def create_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    kwargs = {"echo": config.debug, "future": True}
    if config.database_url.startswith("postgresql+asyncpg"):
        # Supabase uses PgBouncer which doesn't support prepared statements
        kwargs.update(
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            connect_args={"statement_cache_size": 0},
        )
    return create_async_engine(config.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
