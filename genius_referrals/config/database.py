"""
Database configuration.

Async engine and session factory.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from genius_referrals.config.settings import Settings, settings as default_settings


def create_engine(settings: Settings | None = None) -> AsyncEngine:
    """Create async engine from settings."""
    settings = settings or default_settings
    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=not settings.database_url.startswith("sqlite"),
    )


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create session maker bound to the engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def get_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Yield a session and roll back anything left uncommitted.

    Usage:
        async with get_session(session_maker) as session:
            handler = PayoutLifecycleHandler(session, notifier)
            await handler.approve_payout(actor, payout_id, "PAYPAL-001")
    """
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
