# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Async SQLAlchemy engine and session factory.

This module owns the application-global async SQLAlchemy engine and
`async_sessionmaker` shared by the unit of work, probes and CLI commands.

Lifecycle:
    * Call `init_engine_and_sessionmaker(settings)` at app startup (lifespan).
    * Use `get_sessionmaker()` to open sessions (the unit of work owns them).
    * Call `dispose_engine()` during shutdown.

Notes:
    * `pool_pre_ping=True` helps surface dead connections before use.
    * When `db_schema` is set, connections run with that schema first on the
      search path.
    * `get_engine()` lazily initializes from `get_settings()` when the
      lifespan did not run (CLI commands, test transports).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from braslog_api.config.settings import Settings, get_settings

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Initialize the global async engine and sessionmaker (idempotent).

    Raises:
        ValueError: If `database_url` is empty.
    """
    global _engine, _sessionmaker

    if not settings.database_url:
        raise ValueError("database_url must be configured")
    if _engine is not None:
        return

    kwargs: dict[str, Any] = {"future": True, "pool_pre_ping": True, "echo": False}
    if settings.database_url.startswith("postgresql"):
        kwargs["pool_size"] = settings.db_pool_size
        if settings.db_schema:
            kwargs["connect_args"] = {
                "server_settings": {"search_path": f"{settings.db_schema},public"}
            }

    _engine = create_async_engine(settings.database_url, **kwargs)
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, class_=AsyncSession)


def get_engine() -> AsyncEngine:
    """Return the initialized engine, initializing from settings if needed."""
    if _engine is None:
        init_engine_and_sessionmaker(get_settings())
    assert _engine is not None
    return _engine


async def dispose_engine() -> None:
    """Dispose the global engine at application shutdown."""
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the initialized async sessionmaker.

    Raises:
        RuntimeError: If the sessionmaker is not yet initialized.
    """
    if _sessionmaker is None:
        raise RuntimeError("DB sessionmaker not initialized (call init_engine_and_sessionmaker)")
    return _sessionmaker
