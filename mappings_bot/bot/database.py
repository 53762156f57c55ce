"""
Database connection management using asyncpg.
"""

from typing import Optional

import asyncpg

from mappings_bot.utils.logger import LoggerMixin

_log = LoggerMixin("Database")

_pool: Optional[asyncpg.Pool] = None


async def init_database(database_url: str) -> Optional[asyncpg.Pool]:
    """
    Initialize the database connection pool.

    Args:
        database_url: PostgreSQL DSN; empty disables the database

    Returns:
        The pool, or None when no URL is configured
    """
    global _pool

    if not database_url:
        _log.warning("DATABASE_URL not set - using JSON file storage")
        return None

    try:
        _pool = await asyncpg.create_pool(
            database_url,
            min_size=1,
            max_size=5,
            command_timeout=60,
        )
    except (OSError, asyncpg.PostgresError) as e:
        _log.error(f"Failed to connect to database: {e}")
        raise

    _log.success("Database connected successfully")
    await _init_tables()
    return _pool


async def _init_tables() -> None:
    """Create tables if they don't exist."""
    if not _pool:
        return

    async with _pool.acquire() as conn:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS guild_versions (
                command VARCHAR(64) NOT NULL,
                guild_id VARCHAR(32) NOT NULL,
                version VARCHAR(64),
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (command, guild_id)
            )
        """)

    _log.info("Database tables initialized")


async def close_database() -> None:
    """Close database connection pool."""
    global _pool

    if _pool:
        await _pool.close()
        _pool = None
        _log.info("Database connection closed")


def is_connected() -> bool:
    return _pool is not None


def get_pool() -> Optional[asyncpg.Pool]:
    return _pool
