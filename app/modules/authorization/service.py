"""
Permission resolution.

A user holds a permission when it is granted directly (user_permissions) or to
any group the user belongs to (user_groups -> group_permissions). Requests name
permissions; grants are stored by id, so names are resolved against active
permissions on every call. Nothing here is cached: decisions always reflect the
latest association rows.
"""

import logging
from typing import Iterable, List, Set

from app.core.exceptions import NotFoundException
from app.modules.groups.service import GroupService
from app.modules.permissions.schemas import PermissionResponse
from app.modules.permissions.service import PermissionService
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)


class AuthorizationService:
    def __init__(self, store, cache, keys=None):
        self.user_service = UserService(store, cache, keys)
        self.group_service = GroupService(store, cache, keys)
        self.permission_service = PermissionService(store, cache, keys)

    async def get_effective_permission_ids(self, user_id: str) -> Set[str]:
        group_ids = await self.user_service.get_group_ids(user_id)
        direct_ids = await self.user_service.get_direct_permission_ids(user_id)
        group_granted_ids = (
            await self.group_service.get_permission_ids_for_groups(group_ids) if group_ids else []
        )
        return set(direct_ids) | set(group_granted_ids)

    async def verify_user_permissions(self, user_id: str, permission_names: Iterable[str]) -> bool:
        """True iff the user is active and holds every named permission. An empty request is granted."""
        required_names = set(permission_names)
        if not required_names:
            return True

        try:
            await self.user_service.get_by_id(user_id)
        except NotFoundException:
            logger.info(f"User {user_id} denied: no active user")
            return False

        effective_ids = await self.get_effective_permission_ids(user_id)
        required = await self.permission_service.find_by_names(required_names)
        resolved_names = {permission.name for permission in required}

        unknown = required_names - resolved_names
        if unknown:
            logger.info(f"User {user_id} denied: no active permission named {sorted(unknown)}")
            return False

        missing = sorted(p.name for p in required if p.id not in effective_ids)
        if missing:
            logger.info(f"User {user_id} denied: missing {missing}")
            return False
        return True

    async def get_effective_permissions(self, user_id: str) -> List[PermissionResponse]:
        """Active permissions the user holds directly or through groups"""
        effective_ids = await self.get_effective_permission_ids(user_id)
        if not effective_ids:
            return []
        return await self.permission_service.find_by_ids(sorted(effective_ids))
