"""
Many-to-many association writes (user_groups, user_permissions, group_permissions).

Writes are additive: rows already present are left alone through the pair's
unique constraint, and rows missing from a request are not removed.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Type

from pydantic import BaseModel

from app.core.exceptions import NotFoundException
from app.database.store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Association:
    table: str
    owner_field: str
    target_field: str
    row_model: Type[BaseModel]

    @property
    def on_conflict(self) -> str:
        return f"{self.owner_field},{self.target_field}"


def _distinct(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


async def set_associations(
    store: Store,
    association: Association,
    owner_id: str,
    target_ids: Iterable[str],
    target_service,
    missing_error: Callable[[List[str]], NotFoundException],
) -> List[BaseModel]:
    """Associate owner_id with every target id and return the resolved targets.

    The owner must already be validated by the caller. If any target id does not
    resolve to an active entity, missing_error is raised with exactly those ids
    and nothing is written.
    """
    requested = _distinct(target_ids)
    resolved = await target_service.find_by_ids(requested) if requested else []
    resolved_ids = {target.id for target in resolved}
    missing = [target_id for target_id in requested if target_id not in resolved_ids]
    if missing:
        raise missing_error(missing)

    rows = [
        association.row_model(**{
            association.owner_field: owner_id,
            association.target_field: target.id,
        }).model_dump()
        for target in resolved
    ]
    await store.insert_ignore_duplicates(association.table, rows, on_conflict=association.on_conflict)
    logger.info(f"Associated {association.owner_field}={owner_id} with {len(rows)} row(s) in {association.table}")
    return resolved


async def remove_associations(
    store: Store, association: Association, owner_id: str, target_ids: Iterable[str]
) -> int:
    removed = await store.delete_where(
        association.table,
        association.target_field,
        _distinct(target_ids),
        **{association.owner_field: owner_id},
    )
    logger.info(f"Removed {removed} row(s) from {association.table} for {association.owner_field}={owner_id}")
    return removed


async def list_targets(
    store: Store, association: Association, owner_id: str, target_service
) -> List[BaseModel]:
    """Active targets currently associated with owner_id"""
    rows = await store.find(association.table, **{association.owner_field: owner_id})
    target_ids = _distinct(row[association.target_field] for row in rows)
    if not target_ids:
        return []
    return await target_service.find_by_ids(target_ids)
