"""Database session management for the StyleInspo application.

This module handles all aspects of database connection management including:
- Async SQLAlchemy engine and session factory
- Connection pooling configuration
- Session and transaction context managers
- Slow query logging
- Idempotent schema initialization and seeding

The ``SessionManager`` is owned by the application instance
(``app.state.session_manager``) rather than the module, so every app and every
test gets its own engine.
"""

import time
from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncGenerator

from fastapi import Request
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from sqlalchemy import event, select, text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from styleinspo.core.config import DatabaseSettings
from styleinspo.core.logging import get_logger
from styleinspo.models.database import Base, Page

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

SLOW_QUERY_THRESHOLD = 1.0  # seconds

DEFAULT_PAGES = (
    ("about", "About", "Tell visitors about the people behind the looks."),
    ("privacy", "Privacy Policy", "Describe how visitor data is collected and used."),
    ("terms", "Terms of Service", "Set out the terms for using this site."),
    (
        "affiliate-disclosure",
        "Affiliate Disclosure",
        "Some links on this site are affiliate links. We may earn a commission "
        "when you buy through them, at no extra cost to you."
    ),
    ("contact", "Contact", "Questions or collaborations? Send us a message."),
)


class SessionManager:
    """Manage database sessions and connections."""

    def __init__(self, db_settings: DatabaseSettings):
        """Initialize session manager with configuration."""
        self.db_settings = db_settings
        self.engine = self._create_engine()
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )
        self._setup_engine_events()

    def _create_engine(self) -> AsyncEngine:
        """Create SQLAlchemy engine with proper configuration."""
        url = self.db_settings.url
        if self.db_settings.is_sqlite:
            # SQLite is used for local runs and tests; a memory database must
            # stay on one connection to survive between sessions
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                kwargs["poolclass"] = StaticPool
            return create_async_engine(url, echo=self.db_settings.SQL_ECHO, **kwargs)

        return create_async_engine(
            url,
            echo=self.db_settings.SQL_ECHO,
            pool_size=self.db_settings.DB_POOL_SIZE,
            max_overflow=self.db_settings.DB_MAX_OVERFLOW,
            pool_timeout=self.db_settings.DB_POOL_TIMEOUT,
            pool_recycle=self.db_settings.DB_POOL_RECYCLE,
            pool_pre_ping=True
        )

    def _setup_engine_events(self):
        """Set up SQLAlchemy engine event listeners."""
        @event.listens_for(self.engine.sync_engine, 'before_cursor_execute')
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault('query_start_time', []).append(time.time())

        @event.listens_for(self.engine.sync_engine, 'after_cursor_execute')
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            start_times = conn.info.get('query_start_time')
            if not start_times:
                return
            duration = time.time() - start_times.pop()
            if duration > SLOW_QUERY_THRESHOLD:
                logger.warning(
                    "Slow query detected",
                    duration=round(duration, 3),
                    statement=statement
                )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with automatic cleanup."""
        session: AsyncSession = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with transaction management."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def healthcheck(self) -> bool:
        """Perform database health check."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=e)
            return False

    async def dispose(self):
        await self.engine.dispose()


async def init_db(session_manager: SessionManager) -> None:
    """Create missing tables and seed default pages. Safe to call repeatedly."""
    async with session_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with session_manager.transaction() as session:
            result = await session.execute(select(Page.id))
            existing = set(result.scalars().all())
            for page_id, title, content in DEFAULT_PAGES:
                if page_id not in existing:
                    session.add(Page(id=page_id, title=title, content=content))
    except IntegrityError:
        # Another process seeded the same pages first
        logger.info("Default pages already seeded")

    logger.info("Database schema initialized")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    session_manager: SessionManager = request.app.state.session_manager
    async with session_manager.session() as session:
        yield session


def with_tracing(func):
    """Decorator for database operation tracing."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        with tracer.start_as_current_span(
            f"db_{func.__name__}",
            kind=trace.SpanKind.CLIENT
        ) as span:
            try:
                result = await func(*args, **kwargs)
                span.set_status(Status(StatusCode.OK))
                return result
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise
    return wrapper
