"""
tests/conftest.py: Shared test doubles and fixtures.

InMemoryStore mirrors app.database.store.Store method-for-method over plain
dicts, including the unique pair constraint on the association tables, so
service tests exercise real query semantics without Supabase.

InMemoryCache is a dict-backed key/value cache that records every call; the
Redis adapter itself is tested separately against fakeredis.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

import pytest

from app.cache.cache_keys import CacheKeys

ASSOCIATION_KEYS = {
    "user_groups": ("user_id", "group_id"),
    "user_permissions": ("user_id", "permission_id"),
    "group_permissions": ("group_id", "permission_id"),
}


class InMemoryStore:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.writes: List[str] = []

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        row.setdefault("id", str(uuid.uuid4()))
        if table not in ASSOCIATION_KEYS:
            row.setdefault("active", True)
        self._rows(table).append(row)
        return dict(row)

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in filters.items())

    async def find(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._rows(table) if self._matches(r, filters)]

    async def find_in(self, table: str, column: str, values: Iterable[str], **filters: Any) -> List[Dict[str, Any]]:
        values = set(values)
        return [
            dict(r) for r in self._rows(table)
            if r.get(column) in values and self._matches(r, filters)
        ]

    async def find_by_id(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        for row in self._rows(table):
            if row["id"] == row_id:
                return dict(row)
        return None

    async def find_by_ids(self, table: str, ids: Iterable[str]) -> List[Dict[str, Any]]:
        return await self.find_in(table, "id", ids, active=True)

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        self.writes.append(f"insert:{table}")
        return self.seed(table, **row)

    async def insert_ignore_duplicates(self, table: str, rows: List[Dict[str, Any]], on_conflict: str) -> List[Dict[str, Any]]:
        self.writes.append(f"insert:{table}")
        columns = on_conflict.split(",")
        existing = {tuple(r[c] for c in columns) for r in self._rows(table)}
        inserted = []
        for row in rows:
            key = tuple(row[c] for c in columns)
            if key in existing:
                continue
            existing.add(key)
            inserted.append(self.seed(table, **row))
        return inserted

    async def update(self, table: str, row_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.writes.append(f"update:{table}")
        for row in self._rows(table):
            if row["id"] == row_id:
                row.update(patch)
                return dict(row)
        return None

    async def soft_delete(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        return await self.update(table, row_id, {"active": False})

    async def delete_where(self, table: str, column: str, values: Iterable[str], **filters: Any) -> int:
        self.writes.append(f"delete:{table}")
        values = set(values)
        keep = [r for r in self._rows(table) if not (r.get(column) in values and self._matches(r, filters))]
        removed = len(self._rows(table)) - len(keep)
        self.tables[table] = keep
        return removed

    async def count(self, table: str, **filters: Any) -> int:
        return len(await self.find(table, **filters))


class InMemoryCache:
    def __init__(self):
        self.data: Dict[str, str] = {}
        self.deleted: List[str] = []

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        self.data[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self.deleted.append(key)
            self.data.pop(key, None)

    async def close(self) -> None:
        return None


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def keys():
    return CacheKeys(prefix="test")
