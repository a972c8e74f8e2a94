from app.core.associations import Association, list_targets, remove_associations, set_associations
from app.core.entity_service import CachedEntityService
from app.core.exceptions import GroupNotFoundException, PermissionNotFoundException, UserExistsException
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService
from app.modules.permissions.schemas import PermissionResponse
from app.modules.permissions.service import PermissionService
from app.modules.users.schemas import (
    UserCreate, UserUpdate, UserResponse, UserGroup, UserPermission,
    UpdateUserGroups, UpdateUserPermissions
)
from datetime import datetime, timezone
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

USER_GROUPS = Association(
    table="user_groups",
    owner_field="user_id",
    target_field="group_id",
    row_model=UserGroup,
)

USER_PERMISSIONS = Association(
    table="user_permissions",
    owner_field="user_id",
    target_field="permission_id",
    row_model=UserPermission,
)


class UserService(CachedEntityService[UserResponse]):
    table = "users"
    entity = "user"
    model = UserResponse

    def __init__(self, store, cache, keys=None):
        super().__init__(store, cache, keys)
        self.group_service = GroupService(store, cache, keys)
        self.permission_service = PermissionService(store, cache, keys)

    async def create_user(self, user_data: UserCreate) -> UserResponse:
        """Create a new user; email and phone must not belong to another active user"""
        existing = await self.get_user_by_email_or_phone(user_data.email, user_data.phone)
        if existing:
            raise UserExistsException(user_data.email or user_data.phone)
        return await self._insert({**user_data.model_dump(), "active": True})

    async def get_all_users(self) -> List[UserResponse]:
        return await self.get_all()

    async def get_user_by_id(self, user_id: str) -> UserResponse:
        return await self.get_by_id(user_id)

    async def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update user profile; email and phone stay unique among active users"""
        update_data = user_data.model_dump(exclude_none=True)
        await self._ensure_identity_free(user_id, update_data.get("email"), update_data.get("phone"))
        if update_data:
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        return await self._update(user_id, update_data)

    async def delete_user(self, user_id: str) -> UserResponse:
        """Deactivate user and drop their memberships and direct grants"""
        user = await self._soft_delete(user_id)
        memberships = await self.store.delete_where(USER_GROUPS.table, "user_id", [user_id])
        grants = await self.store.delete_where(USER_PERMISSIONS.table, "user_id", [user_id])
        if memberships or grants:
            logger.info(f"Removed {memberships} membership(s) and {grants} grant(s) of user {user_id}")
        return user

    async def _ensure_identity_free(
        self, user_id: str, email: Optional[str], phone: Optional[str]
    ) -> None:
        for column, value in (("email", email), ("phone", phone)):
            if not value:
                continue
            rows = await self.store.find(self.table, active=True, **{column: value})
            if any(row["id"] != user_id for row in rows):
                raise UserExistsException(value)

    async def get_user_by_email_or_phone(
        self, email: Optional[str], phone: Optional[str]
    ) -> Optional[UserResponse]:
        for column, value in (("email", email), ("phone", phone)):
            if not value:
                continue
            rows = await self.store.find(self.table, active=True, **{column: value})
            if rows:
                return self._to_model(rows[0])
        return None

    async def get_user_by_username(self, username: str) -> Optional[UserResponse]:
        """A username is either an email address or a phone number"""
        return await self.get_user_by_email_or_phone(username, username)

    async def get_active_user_by_phone(self, phone: str) -> Optional[UserResponse]:
        return await self.get_user_by_email_or_phone(None, phone)

    async def update_user_permissions(
        self, user_id: str, request: UpdateUserPermissions
    ) -> List[PermissionResponse]:
        """Grant permissions directly to a user; returns the granted permissions"""
        await self.get_by_id(user_id)
        return await set_associations(
            self.store, USER_PERMISSIONS, user_id, request.permissions,
            self.permission_service, PermissionNotFoundException,
        )

    async def update_user_groups(self, user_id: str, request: UpdateUserGroups) -> List[GroupResponse]:
        """Add a user to groups; returns the groups joined"""
        await self.get_by_id(user_id)
        return await set_associations(
            self.store, USER_GROUPS, user_id, request.groups,
            self.group_service, GroupNotFoundException,
        )

    async def remove_user_permissions(self, user_id: str, permission_ids: List[str]) -> int:
        await self.get_by_id(user_id)
        return await remove_associations(self.store, USER_PERMISSIONS, user_id, permission_ids)

    async def remove_user_groups(self, user_id: str, group_ids: List[str]) -> int:
        await self.get_by_id(user_id)
        return await remove_associations(self.store, USER_GROUPS, user_id, group_ids)

    async def get_user_permissions(self, user_id: str) -> List[PermissionResponse]:
        """Active permissions granted directly (not through groups)"""
        await self.get_by_id(user_id)
        return await list_targets(self.store, USER_PERMISSIONS, user_id, self.permission_service)

    async def get_user_groups(self, user_id: str) -> List[GroupResponse]:
        await self.get_by_id(user_id)
        return await list_targets(self.store, USER_GROUPS, user_id, self.group_service)

    async def get_group_ids(self, user_id: str) -> List[str]:
        rows = await self.store.find(USER_GROUPS.table, user_id=user_id)
        return [row["group_id"] for row in rows]

    async def get_direct_permission_ids(self, user_id: str) -> List[str]:
        rows = await self.store.find(USER_PERMISSIONS.table, user_id=user_id)
        return [row["permission_id"] for row in rows]
