from fastapi import APIRouter, Depends
from app.core.dependencies import get_cache, get_store, require_permission
from app.database.store import Store
from app.modules.auth.schemas import CurrentUser
from app.modules.groups.schemas import GroupResponse
from app.modules.permissions.schemas import PermissionResponse
from app.modules.users.schemas import (
    UserCreate, UserUpdate, UserResponse, UpdateUserGroups, UpdateUserPermissions
)
from app.modules.users.service import UserService
from typing import List

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(store: Store = Depends(get_store), cache=Depends(get_cache)) -> UserService:
    return UserService(store, cache)


@router.get("", response_model=List[UserResponse])
async def get_all_users(
    current_user: CurrentUser = Depends(require_permission("ViewUser")),
    service: UserService = Depends(get_user_service)
):
    """List all active users"""
    return await service.get_all_users()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    current_user: CurrentUser = Depends(require_permission("CreateUser")),
    service: UserService = Depends(get_user_service)
):
    return await service.create_user(user_data)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewUser")),
    service: UserService = Depends(get_user_service)
):
    return await service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: CurrentUser = Depends(require_permission("EditUser")),
    service: UserService = Depends(get_user_service)
):
    return await service.update_user(user_id, user_data)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_permission("DeleteUser")),
    service: UserService = Depends(get_user_service)
):
    """Deactivate a user (soft delete)"""
    return await service.delete_user(user_id)


@router.get("/{user_id}/permissions", response_model=List[PermissionResponse])
async def get_user_permissions(
    user_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewUser")),
    service: UserService = Depends(get_user_service)
):
    """Permissions granted directly to the user"""
    return await service.get_user_permissions(user_id)


@router.put("/{user_id}/permissions", response_model=List[PermissionResponse])
async def update_user_permissions(
    user_id: str,
    request: UpdateUserPermissions,
    current_user: CurrentUser = Depends(require_permission("EditUser")),
    service: UserService = Depends(get_user_service)
):
    """Grant permissions to the user (additive)"""
    return await service.update_user_permissions(user_id, request)


@router.delete("/{user_id}/permissions", status_code=200)
async def remove_user_permissions(
    user_id: str,
    request: UpdateUserPermissions,
    current_user: CurrentUser = Depends(require_permission("EditUser")),
    service: UserService = Depends(get_user_service)
):
    removed = await service.remove_user_permissions(user_id, request.permissions)
    return {"removed": removed}


@router.get("/{user_id}/groups", response_model=List[GroupResponse])
async def get_user_groups(
    user_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewUser")),
    service: UserService = Depends(get_user_service)
):
    return await service.get_user_groups(user_id)


@router.put("/{user_id}/groups", response_model=List[GroupResponse])
async def update_user_groups(
    user_id: str,
    request: UpdateUserGroups,
    current_user: CurrentUser = Depends(require_permission("EditUser")),
    service: UserService = Depends(get_user_service)
):
    """Add the user to groups (additive)"""
    return await service.update_user_groups(user_id, request)


@router.delete("/{user_id}/groups", status_code=200)
async def remove_user_groups(
    user_id: str,
    request: UpdateUserGroups,
    current_user: CurrentUser = Depends(require_permission("EditUser")),
    service: UserService = Depends(get_user_service)
):
    removed = await service.remove_user_groups(user_id, request.groups)
    return {"removed": removed}
