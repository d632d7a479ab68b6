# app/core/db.py

import ssl
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import Settings


# =====================================================
# CONNECTION CONFIG
# =====================================================
def _connect_args(settings: Settings) -> dict:
    connect_args = {
        # Disable prepared statements (asyncpg behind pgbouncer)
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
    }

    if settings.db_ssl:
        ssl_ctx = ssl.create_default_context()

        if not settings.db_ssl_verify:
            ssl_ctx.check_hostname = False
            ssl_ctx.verify_mode = ssl.CERT_NONE

        connect_args["ssl"] = ssl_ctx

    return connect_args


# =====================================================
# ENGINE
# =====================================================
def build_engine(settings: Settings) -> AsyncEngine:
    if not settings.database_url:
        raise ValueError("DATABASE_URL is required")

    return create_async_engine(
        settings.database_url,
        echo=False,                         # NEVER enable in prod
        echo_pool=settings.db_echo_pool,    # debugging only
        connect_args=_connect_args(settings),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
    )


# =====================================================
# SESSION
# =====================================================
def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


# =====================================================
# DEPENDENCY
# =====================================================
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session
