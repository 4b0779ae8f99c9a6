"""Async engine and session factory built from settings."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import Settings, get_settings


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the Postgres engine for a service.

    Supabase's transaction pooler does not keep server-side prepared
    statements between transactions, so psycopg's automatic preparation is
    turned off.
    """
    return create_async_engine(
        settings.DATABASE_URL,
        # SQL echo only when debugging locally
        echo=(settings.ENVIRONMENT == "local" and settings.LOG_LEVEL.upper() == "DEBUG"),
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={"prepare_threshold": 0},
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Objects stay readable after commit; handlers return them as responses
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


engine = build_engine(get_settings())
AsyncSessionLocal = build_session_factory(engine)
