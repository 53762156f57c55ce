"""
Base Repository
Generic repository pattern for database operations
"""

from abc import ABC
from typing import Any, Callable, Dict, List, Optional, Sequence

import asyncpg

from mappings_bot.utils.logger import get_logger


class BaseRepository(ABC):
    """
    Base repository class for database operations.

    This is an abstract base class - do not instantiate directly.
    Subclasses provide the table name and primary key columns.
    """

    def __init__(
        self,
        pool: Optional[asyncpg.Pool],
        table_name: str,
        primary_key: Sequence[str] = ("id",),
    ):
        if self.__class__ == BaseRepository:
            raise TypeError("Cannot instantiate abstract BaseRepository directly")

        self.pool = pool
        self.table_name = table_name
        self.primary_key = list(primary_key)
        self.logger = get_logger(self.__class__.__name__)

    def is_connected(self) -> bool:
        return self.pool is not None

    async def query_many(
        self,
        sql: str,
        params: Optional[List[Any]] = None
    ) -> List[asyncpg.Record]:
        """
        Execute a raw query returning multiple rows.

        Args:
            sql: SQL query string
            params: Query parameters

        Returns:
            List of query results, empty when the database is not connected
        """
        if not self.is_connected():
            self.logger.warning("Database not connected, query skipped")
            return []

        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(sql, *(params or []))
        except asyncpg.PostgresError as e:
            self.logger.error(f"Query failed: {e}")
            raise

    async def find_where(self, conditions: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Find records matching every condition.

        Args:
            conditions: Column-value conditions

        Returns:
            List of records as dicts
        """
        keys = list(conditions.keys())
        sql = f"SELECT * FROM {self.table_name}"

        if keys:
            where_clause = " AND ".join(f"{key} = ${i + 1}" for i, key in enumerate(keys))
            sql += f" WHERE {where_clause}"

        rows = await self.query_many(sql, list(conditions.values()))
        return [dict(row) for row in rows]

    def upsert_sql(self, columns: Sequence[str]) -> str:
        """
        Build an upsert statement keyed on the primary key columns.

        Args:
            columns: Columns in the order their values will be passed

        Returns:
            SQL with ``$n`` placeholders, one per column
        """
        placeholders = ", ".join(f"${i + 1}" for i in range(len(columns)))
        update_columns = [f"{c} = EXCLUDED.{c}" for c in columns if c not in self.primary_key]
        update_clause = ", ".join(update_columns + ["updated_at = CURRENT_TIMESTAMP"])

        return f"""
            INSERT INTO {self.table_name} ({', '.join(columns)})
            VALUES ({placeholders})
            ON CONFLICT ({', '.join(self.primary_key)})
            DO UPDATE SET {update_clause}
        """

    async def transaction(self, callback: Callable[[asyncpg.Connection], Any]) -> Any:
        """
        Execute within a transaction.

        Args:
            callback: Async callback receiving connection

        Returns:
            Result from callback
        """
        if not self.is_connected():
            raise RuntimeError("Database not connected")

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                try:
                    return await callback(conn)
                except Exception as e:
                    self.logger.error(f"Transaction failed: {e}")
                    raise
