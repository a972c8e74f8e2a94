"""
Thin async repository over the Supabase (PostgREST) tables.

Services talk to this class instead of building queries themselves, so a test
double with the same methods can stand in for the database.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from supabase import AsyncClient, PostgrestAPIError

from app.core.exceptions import StoreException

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase

    async def _execute(self, table: str, query):
        try:
            return await query.execute()
        except PostgrestAPIError as e:
            logger.error(f"Store error on table {table}: {e}")
            raise StoreException(f"Storage error on {table}") from e

    async def find(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        """Rows matching every equality filter"""
        query = self.supabase.table(table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = await self._execute(table, query)
        return result.data or []

    async def find_in(
        self, table: str, column: str, values: Iterable[str], **filters: Any
    ) -> List[Dict[str, Any]]:
        """Rows whose column is in values (and matching the equality filters)"""
        values = list(values)
        if not values:
            return []
        query = self.supabase.table(table).select("*").in_(column, values)
        for key, value in filters.items():
            query = query.eq(key, value)
        result = await self._execute(table, query)
        return result.data or []

    async def find_by_id(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        query = self.supabase.table(table).select("*").eq("id", row_id).limit(1)
        result = await self._execute(table, query)
        return result.data[0] if result.data else None

    async def find_by_ids(self, table: str, ids: Iterable[str]) -> List[Dict[str, Any]]:
        """Active rows for the given ids; missing or inactive ids are simply absent"""
        return await self.find_in(table, "id", ids, active=True)

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._execute(table, self.supabase.table(table).insert(row))
        if not result.data:
            raise StoreException(f"Failed to insert into {table}")
        return result.data[0]

    async def insert_ignore_duplicates(
        self, table: str, rows: List[Dict[str, Any]], on_conflict: str
    ) -> List[Dict[str, Any]]:
        """Bulk insert; rows that collide with the unique constraint are skipped"""
        if not rows:
            return []
        query = self.supabase.table(table).upsert(
            rows, on_conflict=on_conflict, ignore_duplicates=True
        )
        result = await self._execute(table, query)
        return result.data or []

    async def update(self, table: str, row_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        query = self.supabase.table(table).update(patch).eq("id", row_id)
        result = await self._execute(table, query)
        return result.data[0] if result.data else None

    async def soft_delete(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        return await self.update(table, row_id, {"active": False})

    async def delete_where(self, table: str, column: str, values: Iterable[str], **filters: Any) -> int:
        """Physically delete association rows; returns the number removed"""
        values = list(values)
        if not values:
            return 0
        query = self.supabase.table(table).delete().in_(column, values)
        for key, value in filters.items():
            query = query.eq(key, value)
        result = await self._execute(table, query)
        return len(result.data or [])

    async def count(self, table: str, **filters: Any) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = await self._execute(table, query)
        return result.count or 0
