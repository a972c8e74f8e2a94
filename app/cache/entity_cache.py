"""
Per-entity cache-aside helper shared by the user, group and permission services.

Values are stored as JSON produced by the entity's pydantic model, lists under
the "all" key and single entities under their id. Writes never update cached
values in place; they only invalidate.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from app.cache.cache_keys import CacheKeys

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class EntityCache(Generic[ModelT]):
    def __init__(self, cache, keys: CacheKeys, entity: str, model: Type[ModelT]):
        self.cache = cache
        self.keys = keys
        self.entity = entity
        self.model = model
        self._list_adapter = TypeAdapter(List[model])

    async def get_one(self, entity_id: str) -> Optional[ModelT]:
        raw = await self.cache.get(self.keys.entity(self.entity, entity_id))
        if raw is None:
            return None
        try:
            return self.model.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding unreadable cached {self.entity} {entity_id}")
            await self.invalidate(entity_id)
            return None

    async def set_one(self, item: ModelT) -> None:
        await self.cache.set(self.keys.entity(self.entity, item.id), item.model_dump_json())

    async def get_all(self) -> Optional[List[ModelT]]:
        raw = await self.cache.get(self.keys.all(self.entity))
        if raw is None:
            return None
        try:
            return self._list_adapter.validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding unreadable cached {self.entity} list")
            await self.invalidate_all()
            return None

    async def set_all(self, items: List[ModelT]) -> None:
        await self.cache.set(
            self.keys.all(self.entity),
            self._list_adapter.dump_json(items).decode("utf-8"),
        )

    async def invalidate(self, entity_id: str) -> None:
        """Drop the per-id entry and the list entry in a single DEL"""
        await self.cache.delete(
            self.keys.entity(self.entity, entity_id),
            self.keys.all(self.entity),
        )

    async def invalidate_all(self) -> None:
        await self.cache.delete(self.keys.all(self.entity))
