"""Database dependency wiring for the bridge process.

Provides the module-level engine and dialect adapter, created lazily on
first use and shared by every resolution call.
"""

from __future__ import annotations

import threading

from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.adapter import DialectAdapter
from infrastructure.database.engines import create_engine_for
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level instances (created on first use)
_engine: AsyncEngine | None = None
_adapter: DialectAdapter | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the dialect adapter bound to the engine.

    Returns:
        Configured async engine
    """
    global _engine, _adapter
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                _engine = create_engine_for(settings)
                _adapter = DialectAdapter(
                    _engine, dialect=settings.dialect, probe=_probe
                )
                _probe.engine_created(
                    dialect=settings.dialect.value,
                    target=settings.connection_string,
                )
    return _engine


def get_adapter() -> DialectAdapter:
    """Get the dialect adapter bound to the shared engine.

    Returns:
        DialectAdapter for the configured store
    """
    get_engine()
    assert _adapter is not None
    return _adapter


async def close_database_connections() -> None:
    """Close the shared engine's connections.

    Should be called on shutdown to properly cleanup connections.
    Also resets the adapter to allow reinitialization.
    """
    global _engine, _adapter

    if _engine is not None:
        await _engine.dispose()
        _probe.pool_closed()
        _engine = None
        _adapter = None
