"""
Cache-aside read path and soft-delete write path shared by the user, group
and permission services.
"""

import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from app.cache.cache_keys import CacheKeys
from app.cache.entity_cache import EntityCache
from app.config import settings
from app.core.exceptions import NotFoundException
from app.database.store import Store

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CachedEntityService(Generic[ModelT]):
    table: str = ""
    entity: str = ""
    model: Type[ModelT]

    def __init__(self, store: Store, cache, keys: Optional[CacheKeys] = None):
        self.store = store
        self.cache = EntityCache(
            cache, keys or CacheKeys(prefix=settings.cache_key_prefix), self.entity, self.model
        )

    def _not_found(self, entity_id: str) -> NotFoundException:
        return NotFoundException(self.entity.capitalize(), entity_id)

    def _to_model(self, row: Dict[str, Any]) -> ModelT:
        return self.model(**row)

    async def get_all(self) -> List[ModelT]:
        """All active entities, from cache when present"""
        cached = await self.cache.get_all()
        if cached is not None:
            return cached
        rows = await self.store.find(self.table, active=True)
        items = [self._to_model(row) for row in rows]
        await self.cache.set_all(items)
        return items

    async def get_by_id(self, entity_id: str) -> ModelT:
        cached = await self.cache.get_one(entity_id)
        if cached is not None:
            return cached
        row = await self.store.find_by_id(self.table, entity_id)
        if not row or not row.get("active", False):
            raise self._not_found(entity_id)
        item = self._to_model(row)
        await self.cache.set_one(item)
        return item

    async def find_by_ids(self, ids: Iterable[str]) -> List[ModelT]:
        """Active entities among ids; callers reconcile what is missing"""
        rows = await self.store.find_by_ids(self.table, ids)
        return [self._to_model(row) for row in rows]

    async def _insert(self, row: Dict[str, Any]) -> ModelT:
        created = await self.store.insert(self.table, row)
        await self.cache.invalidate_all()
        logger.info(f"Created {self.entity} {created['id']}")
        return self._to_model(created)

    async def _update(self, entity_id: str, patch: Dict[str, Any]) -> ModelT:
        # Raises NotFound for absent or inactive ids before anything is written
        await self.get_by_id(entity_id)
        if patch:
            # Invalidated on both sides of the write so a read racing the
            # update cannot leave the old value cached
            await self.cache.invalidate(entity_id)
            row = await self.store.update(self.table, entity_id, patch)
            await self.cache.invalidate(entity_id)
            if not row:
                raise self._not_found(entity_id)
            logger.info(f"Updated {self.entity} {entity_id}: {sorted(patch)}")
            return self._to_model(row)
        return await self.get_by_id(entity_id)

    async def _soft_delete(self, entity_id: str) -> ModelT:
        row = await self.store.find_by_id(self.table, entity_id)
        if not row:
            raise self._not_found(entity_id)
        if row.get("active", False):
            await self.cache.invalidate(entity_id)
            row = await self.store.soft_delete(self.table, entity_id) or {**row, "active": False}
            logger.info(f"Deactivated {self.entity} {entity_id}")
        await self.cache.invalidate(entity_id)
        return self._to_model(row)
