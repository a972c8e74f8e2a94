from app.core.entity_service import CachedEntityService
from app.core.exceptions import PermissionExistsException
from app.modules.permissions.schemas import (
    PermissionCreate, PermissionUpdate, PermissionResponse
)
from typing import Iterable, List


class PermissionService(CachedEntityService[PermissionResponse]):
    table = "permissions"
    entity = "permission"
    model = PermissionResponse

    async def _ensure_name_free(self, name: str) -> None:
        if await self.store.find(self.table, name=name, active=True):
            raise PermissionExistsException(name)

    async def create_permission(self, permission_data: PermissionCreate) -> PermissionResponse:
        """Create a new permission"""
        await self._ensure_name_free(permission_data.name)
        return await self._insert({
            "name": permission_data.name,
            "description": permission_data.description,
            "active": True
        })

    async def get_all_permissions(self) -> List[PermissionResponse]:
        return await self.get_all()

    async def get_permission_by_id(self, permission_id: str) -> PermissionResponse:
        return await self.get_by_id(permission_id)

    async def update_permission(self, permission_id: str, permission_data: PermissionUpdate) -> PermissionResponse:
        """Update permission. Renaming changes what existing grants authorize."""
        update_data = {}
        if permission_data.name:
            current = await self.get_by_id(permission_id)
            if permission_data.name != current.name:
                await self._ensure_name_free(permission_data.name)
            update_data["name"] = permission_data.name
        if permission_data.description is not None:
            update_data["description"] = permission_data.description
        return await self._update(permission_id, update_data)

    async def delete_permission(self, permission_id: str) -> PermissionResponse:
        """Soft delete; existing grants stop resolving because only active permissions match"""
        return await self._soft_delete(permission_id)

    async def find_by_names(self, names: Iterable[str]) -> List[PermissionResponse]:
        """Active permissions whose name is in names. Always read from the store."""
        rows = await self.store.find_in(self.table, "name", sorted(set(names)), active=True)
        return [self._to_model(row) for row in rows]
