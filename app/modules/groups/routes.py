from fastapi import APIRouter, Depends
from app.core.dependencies import get_cache, get_store, require_permission
from app.database.store import Store
from app.modules.auth.schemas import CurrentUser
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, UpdateGroupPermissions
)
from app.modules.groups.service import GroupService
from app.modules.permissions.schemas import PermissionResponse
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(store: Store = Depends(get_store), cache=Depends(get_cache)) -> GroupService:
    return GroupService(store, cache)


@router.get("", response_model=List[GroupResponse])
async def get_all_groups(
    current_user: CurrentUser = Depends(require_permission("ViewGroup")),
    service: GroupService = Depends(get_group_service)
):
    """List all active groups"""
    return await service.get_all_groups()


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    current_user: CurrentUser = Depends(require_permission("CreateGroup")),
    service: GroupService = Depends(get_group_service)
):
    return await service.create_group(group_data)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewGroup")),
    service: GroupService = Depends(get_group_service)
):
    return await service.get_group_by_id(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    current_user: CurrentUser = Depends(require_permission("EditGroup")),
    service: GroupService = Depends(get_group_service)
):
    return await service.update_group(group_id, group_data)


@router.delete("/{group_id}", response_model=GroupResponse)
async def delete_group(
    group_id: str,
    current_user: CurrentUser = Depends(require_permission("DeleteGroup")),
    service: GroupService = Depends(get_group_service)
):
    """Deactivate a group; refused while it has members"""
    return await service.delete_group(group_id)


@router.get("/{group_id}/permissions", response_model=List[PermissionResponse])
async def get_group_permissions(
    group_id: str,
    current_user: CurrentUser = Depends(require_permission("ViewGroup")),
    service: GroupService = Depends(get_group_service)
):
    return await service.get_group_permissions(group_id)


@router.put("/{group_id}/permissions", response_model=List[PermissionResponse])
async def update_group_permissions(
    group_id: str,
    request: UpdateGroupPermissions,
    current_user: CurrentUser = Depends(require_permission("EditGroup")),
    service: GroupService = Depends(get_group_service)
):
    """Grant permissions to the group (additive)"""
    return await service.update_group_permissions(group_id, request)


@router.delete("/{group_id}/permissions", status_code=200)
async def remove_group_permissions(
    group_id: str,
    request: UpdateGroupPermissions,
    current_user: CurrentUser = Depends(require_permission("EditGroup")),
    service: GroupService = Depends(get_group_service)
):
    removed = await service.remove_group_permissions(group_id, request.permissions)
    return {"removed": removed}
