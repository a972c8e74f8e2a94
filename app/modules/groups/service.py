from app.core.associations import Association, list_targets, remove_associations, set_associations
from app.core.entity_service import CachedEntityService
from app.core.exceptions import GroupInUseException, PermissionNotFoundException
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupPermission, UpdateGroupPermissions
)
from app.modules.permissions.schemas import PermissionResponse
from app.modules.permissions.service import PermissionService
from typing import List
import logging

logger = logging.getLogger(__name__)

GROUP_PERMISSIONS = Association(
    table="group_permissions",
    owner_field="group_id",
    target_field="permission_id",
    row_model=GroupPermission,
)


class GroupService(CachedEntityService[GroupResponse]):
    table = "groups"
    entity = "group"
    model = GroupResponse

    def __init__(self, store, cache, keys=None):
        super().__init__(store, cache, keys)
        self.permission_service = PermissionService(store, cache, keys)

    async def create_group(self, group_data: GroupCreate) -> GroupResponse:
        """Create a new group"""
        return await self._insert({
            "name": group_data.name,
            "description": group_data.description,
            "active": True
        })

    async def get_all_groups(self) -> List[GroupResponse]:
        return await self.get_all()

    async def get_group_by_id(self, group_id: str) -> GroupResponse:
        return await self.get_by_id(group_id)

    async def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Update group"""
        update_data = {}
        if group_data.name:
            update_data["name"] = group_data.name
        if group_data.description is not None:
            update_data["description"] = group_data.description
        return await self._update(group_id, update_data)

    async def delete_group(self, group_id: str) -> GroupResponse:
        """Soft delete a group that has no members"""
        member_count = await self.store.count("user_groups", group_id=group_id)
        if member_count:
            logger.info(f"Refusing to delete group {group_id} with {member_count} member(s)")
            raise GroupInUseException(group_id, member_count)
        return await self._soft_delete(group_id)

    async def update_group_permissions(
        self, group_id: str, request: UpdateGroupPermissions
    ) -> List[PermissionResponse]:
        """Grant permissions to a group; returns the granted permissions"""
        await self.get_by_id(group_id)
        return await set_associations(
            self.store, GROUP_PERMISSIONS, group_id, request.permissions,
            self.permission_service, PermissionNotFoundException,
        )

    async def remove_group_permissions(self, group_id: str, permission_ids: List[str]) -> int:
        await self.get_by_id(group_id)
        return await remove_associations(self.store, GROUP_PERMISSIONS, group_id, permission_ids)

    async def get_group_permissions(self, group_id: str) -> List[PermissionResponse]:
        await self.get_by_id(group_id)
        return await list_targets(self.store, GROUP_PERMISSIONS, group_id, self.permission_service)

    async def get_permission_ids_for_groups(self, group_ids: List[str]) -> List[str]:
        """Permission ids granted to any of group_ids (used by the authorization resolver)"""
        rows = await self.store.find_in(GROUP_PERMISSIONS.table, "group_id", group_ids)
        return [row["permission_id"] for row in rows]
